"""
Ledger 데이터 모델

계정(Account), 분개 항목(Entry) 및 게시 요청/결과 구조.
금액은 모두 최소 화폐 단위의 정수.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from core.ledger.types import AccountType, JournalSide


# 금액/잔액 표현 범위 (SQLite INTEGER = 부호 있는 64비트)
MAX_AMOUNT = 2**63 - 1
MIN_BALANCE = -(2**63)
MAX_BALANCE = 2**63 - 1


@dataclass(frozen=True)
class Account:
    """계정 스냅샷

    balance는 게시된 분개의 누적 결과(Projection)이며
    TransactionPoster의 원자적 커밋으로만 변경됨.
    """

    id: int
    name: str | None
    account_type: AccountType
    balance: int
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Entry:
    """분개 항목 (생성 후 불변)

    방향은 side, 크기는 amount(양수)로 표현.
    transaction_id는 같은 게시에 속한 항목을 묶는 그룹 키일 뿐
    별도의 거래 레코드를 참조하지 않음.
    """

    id: int
    transaction_id: str
    account_id: int
    side: JournalSide
    amount: int
    name: str | None
    description: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class EntryDraft:
    """게시 요청의 분개 항목"""

    account_id: int
    side: JournalSide
    amount: int
    name: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class BalanceAdjustment:
    """계정별 잔액 조정

    한 게시 안에서 같은 계정을 향한 delta는 합산되어 하나로 전달됨.
    account_type은 delta 계산에 사용한 유형 (커밋 시 재확인).
    """

    account_id: int
    account_type: AccountType
    delta: int


@dataclass(frozen=True)
class PostedBatch:
    """게시 결과"""

    transaction_id: str
    created_entries: list[Entry] = field(default_factory=list)
    updated_accounts: list[Account] = field(default_factory=list)


@dataclass(frozen=True)
class AccountLedger:
    """계정 + 해당 계정의 분개 항목"""

    account: Account
    entries: list[Entry] = field(default_factory=list)


@dataclass(frozen=True)
class BalanceDrift:
    """캐시된 잔액과 분개 재계산 잔액의 불일치"""

    account_id: int
    cached_balance: int
    derived_balance: int

    @property
    def difference(self) -> int:
        return self.cached_balance - self.derived_balance
