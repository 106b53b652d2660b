"""
Protocol 인터페이스 테스트

Protocol 타입 검증 및 구현 확인.
"""

from pathlib import Path

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.interfaces import ILedgerStore
from adapters.memory.ledger_store import InMemoryLedgerStore
from core.ledger.store import LedgerStore


REQUIRED_METHODS = [
    "create_account",
    "get_account",
    "get_accounts_by_ids",
    "list_accounts",
    "list_entries",
    "read_ledger",
    "commit_batch",
]


class TestILedgerStore:
    """ILedgerStore Protocol 테스트"""

    def test_memory_store_implements_protocol(self) -> None:
        """메모리 저장소가 Protocol을 구현하는지 확인"""
        store = InMemoryLedgerStore()

        assert isinstance(store, ILedgerStore)

    def test_sqlite_store_implements_protocol(self, tmp_path: Path) -> None:
        """SQLite 저장소가 Protocol을 구현하는지 확인 (연결 불필요)"""
        store = LedgerStore(SQLiteAdapter(tmp_path / "unused.db"))

        assert isinstance(store, ILedgerStore)

    def test_protocol_has_required_methods(self) -> None:
        """Protocol에 필수 메서드가 정의되어 있는지 확인"""
        for store in (InMemoryLedgerStore(), LedgerStore(SQLiteAdapter(":memory:"))):
            for method_name in REQUIRED_METHODS:
                assert hasattr(store, method_name), f"Missing method: {method_name}"
                assert callable(getattr(store, method_name))

    def test_no_direct_balance_write(self) -> None:
        """잔액 직접 쓰기 경로 없음"""
        assert not hasattr(ILedgerStore, "set_balance")
        assert not hasattr(ILedgerStore, "update_balance")

    def test_plain_object_not_store(self) -> None:
        assert not isinstance(object(), ILedgerStore)
