"""
Ledger 예외 정의

모든 예외는 LedgerError를 상속.
검증 실패는 저장소 쓰기 이전에만 발생하며, 어떤 실패도 부분 반영을 남기지 않음.
"""

from collections.abc import Iterable
from enum import Enum


class ValidationReason(str, Enum):
    """검증 실패 사유"""

    TOO_FEW_ENTRIES = "TOO_FEW_ENTRIES"
    NON_POSITIVE_AMOUNT = "NON_POSITIVE_AMOUNT"
    AMOUNT_OUT_OF_RANGE = "AMOUNT_OUT_OF_RANGE"
    UNBALANCED_TRANSACTION = "UNBALANCED_TRANSACTION"
    UNKNOWN_DIRECTION_FOR_ACCOUNT_TYPE = "UNKNOWN_DIRECTION_FOR_ACCOUNT_TYPE"
    UNKNOWN_ACCOUNT_TYPE = "UNKNOWN_ACCOUNT_TYPE"
    BALANCE_OUT_OF_RANGE = "BALANCE_OUT_OF_RANGE"


class NotFoundReason(str, Enum):
    """조회 실패 사유"""

    UNKNOWN_ACCOUNT = "UNKNOWN_ACCOUNT"
    UNKNOWN_ENTRY = "UNKNOWN_ENTRY"


class LedgerError(Exception):
    """Ledger 예외 기본 클래스"""

    # 동일 요청 재시도로 성공할 수 있는지 여부
    retryable: bool = False


class ValidationError(LedgerError):
    """분개 검증 실패

    Args:
        reason: 실패 사유
        message: 상세 메시지
    """

    def __init__(self, reason: ValidationReason, message: str):
        super().__init__(message)
        self.reason = reason


class NotFoundError(LedgerError):
    """참조 계정 없음"""

    reason = NotFoundReason.UNKNOWN_ACCOUNT

    def __init__(self, account_ids: Iterable[int], message: str | None = None):
        self.account_ids = sorted(account_ids)
        super().__init__(message or f"Unknown account(s): {self.account_ids}")


class EntryNotFoundError(NotFoundError):
    """분개 항목 없음"""

    reason = NotFoundReason.UNKNOWN_ENTRY

    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__([], f"Unknown entry: {entry_id}")


class ConflictError(LedgerError):
    """동시 커밋 충돌

    잠금 대기 상한 초과 또는 커밋 도중 계정 상태 변경.
    동일 배치를 그대로 재시도하면 됨.
    """

    retryable = True


class StorageError(LedgerError):
    """저장소 커밋 실패 (롤백 완료, 재시도 가능)"""

    retryable = True


class DuplicateError(LedgerError):
    """이미 존재하는 식별자"""

    pass


class DuplicateTransactionError(DuplicateError):
    """이미 게시된 transaction_id"""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction already posted: {transaction_id}")


class DuplicateAccountError(DuplicateError):
    """이미 존재하는 account_id"""

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Account already exists: {account_id}")
