"""
복식부기 타입 정의

AccountType, JournalSide 등 Ledger 시스템에서 사용하는 Enum 정의
"""

from enum import Enum


class AccountType(str, Enum):
    """계정 유형

    복식부기의 5대 계정 유형.
    str을 상속하여 JSON 직렬화 가능.
    """

    ASSET = "ASSET"  # 자산
    LIABILITY = "LIABILITY"  # 부채
    EQUITY = "EQUITY"  # 자본
    REVENUE = "REVENUE"  # 수익
    EXPENSE = "EXPENSE"  # 비용


class JournalSide(str, Enum):
    """분개 방향 (차변/대변)"""

    DEBIT = "DEBIT"  # 차변 (자산 증가, 비용 증가)
    CREDIT = "CREDIT"  # 대변 (부채 증가, 수익 증가)


class BalanceDirection(str, Enum):
    """잔액 변동 방향"""

    INCREMENT = "INCREMENT"
    DECREMENT = "DECREMENT"

    @property
    def sign(self) -> int:
        """부호 (+1 / -1)"""
        return 1 if self is BalanceDirection.INCREMENT else -1
