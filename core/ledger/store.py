"""
Ledger 저장소 (SQLite)

계정/분개 저장 및 조회.
account.balance는 entry의 Projection으로, commit_batch 안에서만 갱신됨.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import Iterable, Sequence
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, AsyncIterator

from core.ledger.direction import apply_delta
from core.ledger.errors import (
    ConflictError,
    DuplicateAccountError,
    DuplicateTransactionError,
    NotFoundError,
    StorageError,
)
from core.ledger.models import Account, BalanceAdjustment, Entry, EntryDraft
from core.ledger.types import AccountType, JournalSide

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


ACCOUNT_COLUMNS = "id, name, account_type, balance, created_at, updated_at"
ENTRY_COLUMNS = (
    "id, transaction_id, account_id, side, amount, name, description, "
    "created_at, updated_at"
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _placeholders(count: int) -> str:
    return ", ".join("?" * count)


def _is_lock_error(error: sqlite3.OperationalError) -> bool:
    message = str(error).lower()
    return "locked" in message or "busy" in message


def _row_to_account(row: tuple[Any, ...]) -> Account:
    return Account(
        id=row[0],
        name=row[1],
        account_type=AccountType(row[2]),
        balance=int(row[3]),
        created_at=datetime.fromisoformat(row[4]),
        updated_at=datetime.fromisoformat(row[5]),
    )


def _row_to_entry(row: tuple[Any, ...]) -> Entry:
    return Entry(
        id=row[0],
        transaction_id=row[1],
        account_id=row[2],
        side=JournalSide(row[3]),
        amount=int(row[4]),
        name=row[5],
        description=row[6],
        created_at=datetime.fromisoformat(row[7]),
        updated_at=datetime.fromisoformat(row[8]),
    )


class LedgerStore:
    """Ledger 저장소

    ILedgerStore Protocol 구현 (SQLite).
    잔액은 `balance = balance + ?` 원자적 증감으로만 변경.

    Args:
        db: 연결된 SQLiteAdapter
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # -------------------------------------------------------------------------
    # 잠금 / 오류 변환
    # -------------------------------------------------------------------------

    @asynccontextmanager
    async def _atomic(self) -> AsyncIterator[None]:
        """쓰기 트랜잭션 (BEGIN IMMEDIATE)

        잠금 대기 초과 → ConflictError, 그 외 SQLite 오류 → StorageError.
        드라이버가 64비트 범위 밖 정수를 거부한 경우도 StorageError.
        어떤 경우에도 롤백 후 전파됨.
        """
        try:
            async with self.db.transaction(immediate=True):
                yield
        except asyncio.TimeoutError as e:
            raise ConflictError("Timed out waiting for ledger write lock") from e
        except sqlite3.OperationalError as e:
            if _is_lock_error(e):
                raise ConflictError(f"Ledger database is locked: {e}") from e
            raise StorageError(f"Ledger commit failed: {e}") from e
        except sqlite3.Error as e:
            raise StorageError(f"Ledger commit failed: {e}") from e
        except OverflowError as e:
            raise StorageError(f"Ledger commit failed, value out of range: {e}") from e

    @asynccontextmanager
    async def _reading(self) -> AsyncIterator[None]:
        """조회 구간 (진행 중인 커밋과 겹치지 않음)"""
        try:
            async with self.db.locked():
                yield
        except asyncio.TimeoutError as e:
            raise ConflictError("Timed out waiting for ledger read") from e
        except sqlite3.Error as e:
            raise StorageError(f"Ledger read failed: {e}") from e

    @asynccontextmanager
    async def _snapshot(self) -> AsyncIterator[None]:
        """여러 테이블을 같은 커밋 시점으로 읽는 구간"""
        try:
            async with self.db.snapshot():
                yield
        except asyncio.TimeoutError as e:
            raise ConflictError("Timed out waiting for ledger read") from e
        except sqlite3.Error as e:
            raise StorageError(f"Ledger read failed: {e}") from e

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
        now = _now_iso()

        async with self._atomic():
            if account_id is not None:
                exists = await self.db.fetchone(
                    "SELECT 1 FROM account WHERE id = ?", (account_id,)
                )
                if exists:
                    raise DuplicateAccountError(account_id)

            cursor = await self.db.execute(
                """
                INSERT INTO account (id, name, account_type, balance, created_at, updated_at)
                VALUES (?, ?, ?, 0, ?, ?)
                """,
                (account_id, name, AccountType(account_type).value, now, now),
            )
            new_id = cursor.lastrowid

            row = await self.db.fetchone(
                f"SELECT {ACCOUNT_COLUMNS} FROM account WHERE id = ?", (new_id,)
            )
            if row is None:
                raise StorageError(f"Account {new_id} missing right after insert")

        account = _row_to_account(row)
        logger.info(
            f"Account created: {account.id}",
            extra={"account_id": account.id, "account_type": account.account_type.value},
        )
        return account

    async def get_account(self, account_id: int) -> Account | None:
        """계정 단건 조회"""
        async with self._reading():
            row = await self.db.fetchone(
                f"SELECT {ACCOUNT_COLUMNS} FROM account WHERE id = ?", (account_id,)
            )
        return _row_to_account(row) if row else None

    async def get_accounts_by_ids(self, account_ids: Iterable[int]) -> dict[int, Account]:
        """계정 일괄 조회"""
        ids = sorted(set(account_ids))
        if not ids:
            return {}

        async with self._reading():
            rows = await self.db.fetchall(
                f"SELECT {ACCOUNT_COLUMNS} FROM account WHERE id IN ({_placeholders(len(ids))})",
                tuple(ids),
            )
        return {row[0]: _row_to_account(row) for row in rows}

    async def list_accounts(self) -> list[Account]:
        """전체 계정 조회"""
        async with self._reading():
            rows = await self.db.fetchall(
                f"SELECT {ACCOUNT_COLUMNS} FROM account ORDER BY id"
            )
        return [_row_to_account(row) for row in rows]

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
        conditions: list[str] = []
        params: list[Any] = []

        if transaction_id is not None:
            conditions.append("transaction_id = ?")
            params.append(transaction_id)
        if entry_id is not None:
            conditions.append("id = ?")
            params.append(entry_id)
        if account_id is not None:
            conditions.append("account_id = ?")
            params.append(account_id)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        async with self._reading():
            rows = await self.db.fetchall(
                f"SELECT {ENTRY_COLUMNS} FROM entry {where} ORDER BY id",
                tuple(params),
            )
        return [_row_to_entry(row) for row in rows]

    async def read_ledger(
        self, account_id: int | None = None
    ) -> tuple[list[Account], list[Entry]]:
        """계정과 분개를 하나의 읽기 트랜잭션으로 조회

        account_id를 지정하면 해당 계정과 그 계정의 분개만.
        """
        account_where, entry_where, params = "", "", ()
        if account_id is not None:
            account_where, entry_where = "WHERE id = ?", "WHERE account_id = ?"
            params = (account_id,)

        async with self._snapshot():
            account_rows = await self.db.fetchall(
                f"SELECT {ACCOUNT_COLUMNS} FROM account {account_where} ORDER BY id",
                params,
            )
            entry_rows = await self.db.fetchall(
                f"SELECT {ENTRY_COLUMNS} FROM entry {entry_where} ORDER BY id",
                params,
            )
        return (
            [_row_to_account(row) for row in account_rows],
            [_row_to_entry(row) for row in entry_rows],
        )

    async def commit_batch(
        self,
        transaction_id: str,
        drafts: Sequence[EntryDraft],
        adjustments: Sequence[BalanceAdjustment],
    ) -> tuple[list[Entry], list[Account]]:
        """분개 생성 + 잔액 조정 원자적 커밋

        하나의 BEGIN IMMEDIATE 트랜잭션 안에서:
        1. transaction_id 중복 확인
        2. 계정 존재 및 유형 재확인 (delta 계산 이후 변경 감지)
           + 갱신 후 잔액의 64비트 범위 확인 (BALANCE_OUT_OF_RANGE)
        3. entry INSERT
        4. account.balance 원자적 증감
        5. 커밋 후 스냅샷 조회
        """
        account_ids = sorted(
            {d.account_id for d in drafts} | {a.account_id for a in adjustments}
        )
        now = _now_iso()

        async with self._atomic():
            duplicate = await self.db.fetchone(
                "SELECT 1 FROM entry WHERE transaction_id = ? LIMIT 1",
                (transaction_id,),
            )
            if duplicate:
                raise DuplicateTransactionError(transaction_id)

            rows = await self.db.fetchall(
                f"SELECT id, account_type, balance FROM account WHERE id IN ({_placeholders(len(account_ids))})",
                tuple(account_ids),
            )
            current_types = {row[0]: row[1] for row in rows}
            current_balances = {row[0]: row[2] for row in rows}

            missing = set(account_ids) - current_types.keys()
            if missing:
                raise NotFoundError(missing)

            for adjustment in adjustments:
                if current_types[adjustment.account_id] != AccountType(adjustment.account_type).value:
                    raise ConflictError(
                        f"Account {adjustment.account_id} type changed during posting"
                    )
                apply_delta(
                    adjustment.account_id,
                    current_balances[adjustment.account_id],
                    adjustment.delta,
                )

            entry_ids: list[int] = []
            for draft in drafts:
                cursor = await self.db.execute(
                    """
                    INSERT INTO entry (
                        transaction_id, name, description, side, amount,
                        account_id, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        transaction_id,
                        draft.name,
                        draft.description,
                        JournalSide(draft.side).value,
                        draft.amount,
                        draft.account_id,
                        now,
                        now,
                    ),
                )
                entry_ids.append(cursor.lastrowid)

            for adjustment in adjustments:
                await self.db.execute(
                    """
                    UPDATE account
                    SET balance = balance + ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (adjustment.delta, now, adjustment.account_id),
                )

            entry_rows = await self.db.fetchall(
                f"SELECT {ENTRY_COLUMNS} FROM entry WHERE id IN ({_placeholders(len(entry_ids))}) ORDER BY id",
                tuple(entry_ids),
            ) if entry_ids else []

            adjusted_ids = [a.account_id for a in adjustments]
            account_rows = await self.db.fetchall(
                f"SELECT {ACCOUNT_COLUMNS} FROM account WHERE id IN ({_placeholders(len(adjusted_ids))})",
                tuple(adjusted_ids),
            ) if adjusted_ids else []

        accounts_by_id = {row[0]: _row_to_account(row) for row in account_rows}

        logger.debug(
            f"Committed transaction: {transaction_id}",
            extra={"transaction_id": transaction_id, "entry_count": len(entry_ids)},
        )
        return (
            [_row_to_entry(row) for row in entry_rows],
            [accounts_by_id[account_id] for account_id in adjusted_ids],
        )
