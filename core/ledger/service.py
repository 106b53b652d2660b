"""
Ledger 서비스

호출자(Web 라우트 등)가 사용하는 경계 연산.
상태를 변경하는 연산은 post_transaction과 create_account 뿐.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from core.ledger.direction import signed_delta
from core.ledger.errors import (
    EntryNotFoundError,
    NotFoundError,
    ValidationError,
    ValidationReason,
)
from core.ledger.models import (
    Account,
    AccountLedger,
    BalanceDrift,
    Entry,
    EntryDraft,
    PostedBatch,
)
from core.ledger.poster import TransactionPoster
from core.ledger.types import AccountType

if TYPE_CHECKING:
    from adapters.interfaces import ILedgerStore

logger = logging.getLogger(__name__)


class LedgerService:
    """Ledger 서비스

    Args:
        store: ILedgerStore 구현체 (메모리 또는 SQLite)

    사용 예시:
    ```python
    service = LedgerService(InMemoryLedgerStore())
    cash = await service.create_account("Cash", AccountType.ASSET)
    loan = await service.create_account("Loan", AccountType.LIABILITY)

    await service.post_transaction("tx-1", [
        EntryDraft(account_id=cash.id, side=JournalSide.DEBIT, amount=500),
        EntryDraft(account_id=loan.id, side=JournalSide.CREDIT, amount=500),
    ])
    ```
    """

    def __init__(self, store: ILedgerStore):
        self.store = store
        self.poster = TransactionPoster(store)

    async def post_transaction(
        self,
        transaction_id: str,
        entries: Sequence[EntryDraft],
    ) -> PostedBatch:
        """거래 게시 (잔액을 변경하는 유일한 경로)"""
        return await self.poster.post(transaction_id, entries)

    async def create_account(
        self,
        name: str | None,
        account_type: AccountType | str,
        account_id: int | None = None,
    ) -> Account:
        """계정 생성

        Raises:
            ValidationError: 알 수 없는 계정 유형 (UNKNOWN_ACCOUNT_TYPE)
            DuplicateAccountError: account_id 중복
        """
        try:
            resolved_type = AccountType(account_type)
        except ValueError as e:
            valid_types = [t.value for t in AccountType]
            raise ValidationError(
                ValidationReason.UNKNOWN_ACCOUNT_TYPE,
                f"Unknown account type: {account_type!r}. Valid: {valid_types}",
            ) from e

        return await self.store.create_account(name, resolved_type, account_id)

    async def get_account(self, account_id: int) -> Account:
        """계정 조회

        Raises:
            NotFoundError: 계정 없음
        """
        account = await self.store.get_account(account_id)
        if account is None:
            raise NotFoundError([account_id])
        return account

    async def get_account_with_entries(self, account_id: int) -> AccountLedger:
        """계정 + 해당 계정의 분개 항목 (같은 커밋 시점)

        Raises:
            NotFoundError: 계정 없음
        """
        accounts, entries = await self.store.read_ledger(account_id)
        if not accounts:
            raise NotFoundError([account_id])
        return AccountLedger(account=accounts[0], entries=entries)

    async def get_entry(self, entry_id: int) -> Entry:
        """분개 항목 단건 조회

        Raises:
            EntryNotFoundError: 항목 없음
        """
        entries = await self.store.list_entries(entry_id=entry_id)
        if not entries:
            raise EntryNotFoundError(entry_id)
        return entries[0]

    async def list_entries_by_transaction(self, transaction_id: str) -> list[Entry]:
        return await self.store.list_entries(transaction_id=transaction_id)

    async def list_entries(self) -> list[Entry]:
        return await self.store.list_entries()

    async def list_accounts(self) -> list[Account]:
        return await self.store.list_accounts()

    async def reconcile(self) -> list[BalanceDrift]:
        """캐시된 잔액과 분개 재계산 잔액 비교

        모든 entry를 커밋 순서대로 재적용한 결과와 account.balance가
        다른 계정만 반환. 정상 상태에서는 빈 목록.
        계정과 분개는 같은 커밋 시점에서 읽으므로 동시 게시 중에도 실행 가능.
        """
        accounts, entries = await self.store.read_ledger()
        types = {account.id: account.account_type for account in accounts}

        derived: dict[int, int] = {account.id: 0 for account in accounts}
        for entry in entries:
            derived[entry.account_id] += signed_delta(
                types[entry.account_id], entry.side, entry.amount
            )

        drifts = [
            BalanceDrift(
                account_id=account.id,
                cached_balance=account.balance,
                derived_balance=derived[account.id],
            )
            for account in accounts
            if account.balance != derived[account.id]
        ]

        if drifts:
            logger.warning(
                f"Balance drift detected on {len(drifts)} account(s)",
                extra={"account_ids": [d.account_id for d in drifts]},
            )
        return drifts
