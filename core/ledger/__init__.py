"""
복식부기 (Double-Entry Bookkeeping) 시스템

분개 항목(Entry)의 이력만으로 계정 잔액을 도출하는 Ledger.
잔액은 게시(posting)의 원자적 커밋 안에서만 변경됨.

사용 예시:
```python
from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger import EntryDraft, JournalSide, LedgerService, LedgerStore
from core.ledger.schema import init_ledger_schema

async with SQLiteAdapter(db_path) as db:
    await init_ledger_schema(db)
    service = LedgerService(LedgerStore(db))

    batch = await service.post_transaction("tx-1", [
        EntryDraft(account_id=1, side=JournalSide.DEBIT, amount=1234),
        EntryDraft(account_id=2, side=JournalSide.CREDIT, amount=1234),
    ])
```
"""

from core.ledger.direction import NORMAL_BALANCE_SIDE, apply_delta, resolve_direction, signed_delta
from core.ledger.errors import (
    ConflictError,
    DuplicateAccountError,
    DuplicateError,
    DuplicateTransactionError,
    EntryNotFoundError,
    LedgerError,
    NotFoundError,
    StorageError,
    NotFoundReason,
    ValidationError,
    ValidationReason,
)
from core.ledger.models import (
    Account,
    AccountLedger,
    BalanceAdjustment,
    BalanceDrift,
    Entry,
    EntryDraft,
    PostedBatch,
)
from core.ledger.poster import TransactionPoster
from core.ledger.service import LedgerService
from core.ledger.store import LedgerStore
from core.ledger.types import AccountType, BalanceDirection, JournalSide

__all__ = [
    # 핵심 클래스
    "LedgerService",
    "LedgerStore",
    "TransactionPoster",
    # 모델
    "Account",
    "AccountLedger",
    "BalanceAdjustment",
    "BalanceDrift",
    "Entry",
    "EntryDraft",
    "PostedBatch",
    # Enum
    "AccountType",
    "BalanceDirection",
    "JournalSide",
    "ValidationReason",
    "NotFoundReason",
    # 방향 결정
    "NORMAL_BALANCE_SIDE",
    "resolve_direction",
    "signed_delta",
    "apply_delta",
    # 예외
    "LedgerError",
    "ValidationError",
    "NotFoundError",
    "EntryNotFoundError",
    "ConflictError",
    "StorageError",
    "DuplicateError",
    "DuplicateTransactionError",
    "DuplicateAccountError",
]
