"""
메모리 Ledger 저장소

ILedgerStore Protocol의 참조 구현.
스레드/이벤트 루프 어느 쪽에서 호출되어도 원자성과 격리를 보장.

동시성 모델:
- 계정마다 threading.Lock 하나 (잔액 read-modify-write 구간만 보호)
- 여러 계정은 id 오름차순으로 획득 (교착 방지)
- 획득 대기는 lock_timeout_sec 상한, 초과 시 ConflictError
- entry 추가와 계정 스냅샷 교체는 publish Lock 아래에서 한 번에 공개
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import datetime, timezone

from core.constants import Defaults
from core.ledger.direction import apply_delta
from core.ledger.errors import (
    ConflictError,
    DuplicateAccountError,
    DuplicateTransactionError,
    NotFoundError,
)
from core.ledger.models import Account, BalanceAdjustment, Entry, EntryDraft
from core.ledger.types import AccountType, JournalSide

logger = logging.getLogger(__name__)


class InMemoryLedgerStore:
    """메모리 Ledger 저장소

    사용 예시:
    ```python
    store = InMemoryLedgerStore(lock_timeout_sec=1.0)
    cash = await store.create_account("Cash", AccountType.ASSET)
    ```

    Args:
        lock_timeout_sec: 계정 Lock 대기 상한 (초)
    """

    def __init__(self, lock_timeout_sec: float = Defaults.LOCK_TIMEOUT_SEC):
        self.lock_timeout_sec = lock_timeout_sec

        self._accounts: dict[int, Account] = {}
        self._entries: list[Entry] = []
        self._account_locks: dict[int, threading.Lock] = {}
        self._posted_transactions: set[str] = set()

        # 공개 상태(_accounts, _entries, id 카운터) 보호
        self._publish_lock = threading.Lock()
        # transaction_id 예약 보호
        self._registry_lock = threading.Lock()

        self._next_account_id = 1
        self._next_entry_id = 1

    # -------------------------------------------------------------------------
    # 계정
    # -------------------------------------------------------------------------

    async def create_account(
        self,
        name: str | None,
        account_type: AccountType,
        account_id: int | None = None,
    ) -> Account:
        """계정 생성 (잔액 0)"""
        now = datetime.now(timezone.utc)
        account_type = AccountType(account_type)

        with self._publish_lock:
            if account_id is None:
                account_id = self._next_account_id
            elif account_id in self._accounts:
                raise DuplicateAccountError(account_id)

            self._next_account_id = max(self._next_account_id, account_id + 1)

            account = Account(
                id=account_id,
                name=name,
                account_type=account_type,
                balance=0,
                created_at=now,
                updated_at=now,
            )
            self._account_locks[account_id] = threading.Lock()
            self._accounts[account_id] = account

        logger.info(
            f"Account created: {account.id}",
            extra={"account_id": account.id, "account_type": account_type.value},
        )
        return account

    async def get_account(self, account_id: int) -> Account | None:
        with self._publish_lock:
            return self._accounts.get(account_id)

    async def get_accounts_by_ids(self, account_ids: Iterable[int]) -> dict[int, Account]:
        with self._publish_lock:
            return {
                account_id: self._accounts[account_id]
                for account_id in set(account_ids)
                if account_id in self._accounts
            }

    async def list_accounts(self) -> list[Account]:
        with self._publish_lock:
            return [self._accounts[account_id] for account_id in sorted(self._accounts)]

    # -------------------------------------------------------------------------
    # 분개
    # -------------------------------------------------------------------------

    async def list_entries(
        self,
        transaction_id: str | None = None,
        entry_id: int | None = None,
        account_id: int | None = None,
    ) -> list[Entry]:
        """분개 항목 조회 (id 오름차순 = 커밋 순서)"""
        with self._publish_lock:
            entries = list(self._entries)

        return [
            entry
            for entry in entries
            if (transaction_id is None or entry.transaction_id == transaction_id)
            and (entry_id is None or entry.id == entry_id)
            and (account_id is None or entry.account_id == account_id)
        ]

    async def read_ledger(
        self, account_id: int | None = None
    ) -> tuple[list[Account], list[Entry]]:
        """계정과 분개를 같은 공개 시점으로 조회"""
        with self._publish_lock:
            if account_id is None:
                accounts = [self._accounts[i] for i in sorted(self._accounts)]
                entries = list(self._entries)
            else:
                account = self._accounts.get(account_id)
                accounts = [account] if account is not None else []
                entries = [e for e in self._entries if e.account_id == account_id]
        return accounts, entries

    async def commit_batch(
        self,
        transaction_id: str,
        drafts: Sequence[EntryDraft],
        adjustments: Sequence[BalanceAdjustment],
    ) -> tuple[list[Entry], list[Account]]:
        """분개 생성 + 잔액 조정 원자적 커밋

        모든 검사는 공개 이전에 끝나므로 실패 시 어떤 변경도 남지 않음.
        """
        account_ids = sorted(
            {d.account_id for d in drafts} | {a.account_id for a in adjustments}
        )

        self._reserve_transaction(transaction_id)
        try:
            held = self._acquire_account_locks(account_ids)
            try:
                return self._apply(transaction_id, drafts, adjustments, account_ids)
            finally:
                for lock in reversed(held):
                    lock.release()
        except Exception:
            self._release_transaction(transaction_id)
            raise

    # -------------------------------------------------------------------------
    # 내부 구현
    # -------------------------------------------------------------------------

    def _reserve_transaction(self, transaction_id: str) -> None:
        with self._registry_lock:
            if transaction_id in self._posted_transactions:
                raise DuplicateTransactionError(transaction_id)
            self._posted_transactions.add(transaction_id)

    def _release_transaction(self, transaction_id: str) -> None:
        with self._registry_lock:
            self._posted_transactions.discard(transaction_id)

    def _acquire_account_locks(self, account_ids: list[int]) -> list[threading.Lock]:
        """계정 Lock을 id 순서로 획득 (실패 시 이미 획득한 Lock 해제)"""
        with self._publish_lock:
            locks = {
                account_id: self._account_locks[account_id]
                for account_id in account_ids
                if account_id in self._account_locks
            }

        missing = set(account_ids) - locks.keys()
        if missing:
            raise NotFoundError(missing)

        held: list[threading.Lock] = []
        for account_id, lock in sorted(locks.items()):
            if not lock.acquire(timeout=self.lock_timeout_sec):
                for acquired in reversed(held):
                    acquired.release()
                raise ConflictError(
                    f"Timed out waiting for account {account_id} "
                    f"({self.lock_timeout_sec}s)"
                )
            held.append(lock)
        return held

    def _apply(
        self,
        transaction_id: str,
        drafts: Sequence[EntryDraft],
        adjustments: Sequence[BalanceAdjustment],
        account_ids: list[int],
    ) -> tuple[list[Entry], list[Account]]:
        # 계정 Lock을 쥔 상태이므로 해당 계정 스냅샷은 이 구간에서 변하지 않음
        current = {account_id: self._accounts[account_id] for account_id in account_ids}

        for adjustment in adjustments:
            if current[adjustment.account_id].account_type is not AccountType(adjustment.account_type):
                raise ConflictError(
                    f"Account {adjustment.account_id} type changed during posting"
                )

        now = datetime.now(timezone.utc)
        updated = {
            adjustment.account_id: replace(
                current[adjustment.account_id],
                balance=apply_delta(
                    adjustment.account_id,
                    current[adjustment.account_id].balance,
                    adjustment.delta,
                ),
                updated_at=now,
            )
            for adjustment in adjustments
        }

        with self._publish_lock:
            entries = [
                Entry(
                    id=self._next_entry_id + offset,
                    transaction_id=transaction_id,
                    account_id=draft.account_id,
                    side=JournalSide(draft.side),
                    amount=draft.amount,
                    name=draft.name,
                    description=draft.description,
                    created_at=now,
                    updated_at=now,
                )
                for offset, draft in enumerate(drafts)
            ]
            self._next_entry_id += len(entries)
            self._entries.extend(entries)
            self._accounts.update(updated)

        logger.debug(
            f"Committed transaction: {transaction_id}",
            extra={"transaction_id": transaction_id, "entry_count": len(entries)},
        )
        return entries, [updated[a.account_id] for a in adjustments]
