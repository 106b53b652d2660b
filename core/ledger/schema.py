"""
복식부기 스키마 초기화

Web 시작 시 자동으로 Ledger 테이블, 인덱스, 트리거 생성.
CREATE IF NOT EXISTS 패턴으로 안전하게 동작.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """Ledger 스키마 초기화 (테이블 + 인덱스 + 트리거)

    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).

    Args:
        db: 연결된 SQLiteAdapter 인스턴스
    """
    await _create_ledger_tables(db)
    await _create_ledger_indexes(db)
    await _create_ledger_triggers(db)
    await db.commit()
    logger.info("Ledger 스키마 초기화 완료")


async def _create_ledger_tables(db: "SQLiteAdapter") -> None:
    """Ledger 테이블 생성"""

    # account 테이블 (balance는 entry의 Projection)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS account (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            name             TEXT,
            account_type     TEXT NOT NULL,
            balance          INTEGER NOT NULL DEFAULT 0,
            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL
        )
    """)

    # entry 테이블 (append-only)
    # transaction_id는 그룹 키 (참조 제약 없음)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS entry (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            transaction_id   TEXT NOT NULL,
            name             TEXT,
            description      TEXT,
            side             TEXT NOT NULL CHECK (side IN ('DEBIT', 'CREDIT')),
            amount           INTEGER NOT NULL CHECK (amount > 0),
            account_id       INTEGER NOT NULL,
            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL,
            FOREIGN KEY (account_id) REFERENCES account(id)
        )
    """)


async def _create_ledger_indexes(db: "SQLiteAdapter") -> None:
    """조회용 인덱스 생성"""

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_entry_transaction_id
        ON entry(transaction_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_entry_account_id
        ON entry(account_id)
    """)


async def _create_ledger_triggers(db: "SQLiteAdapter") -> None:
    """entry 수정/삭제 차단 트리거"""

    await db.execute("""
        CREATE TRIGGER IF NOT EXISTS trg_entry_no_update
        BEFORE UPDATE ON entry
        BEGIN
            SELECT RAISE(ABORT, 'entry is append-only');
        END
    """)

    await db.execute("""
        CREATE TRIGGER IF NOT EXISTS trg_entry_no_delete
        BEFORE DELETE ON entry
        BEGIN
            SELECT RAISE(ABORT, 'entry is append-only');
        END
    """)
