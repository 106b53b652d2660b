"""
pytest 공통 fixture 정의

설정 파일, 임시 DB, 메모리/SQLite Ledger 서비스
"""

import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.memory.ledger_store import InMemoryLedgerStore
from core.config.loader import Settings
from core.ledger.schema import init_ledger_schema
from core.ledger.service import LedgerService
from core.ledger.store import LedgerStore


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성 (sqlite)"""
    settings_content = f"""# 테스트용 settings.yaml
ledger:
  backend: sqlite
  db_path: {temp_dir / "ledger.db"}
  lock_timeout_sec: 2
  busy_timeout_ms: 1000

logging:
  level: debug

web:
  host: 0.0.0.0
  port: 9000
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_memory(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성 (memory, 나머지 기본값)"""
    settings_content = """ledger:
  backend: memory
"""
    settings_path = temp_dir / "settings_memory.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_invalid_backend(temp_dir: Path) -> Path:
    """잘못된 backend의 settings.yaml 파일 생성"""
    settings_content = """ledger:
  backend: postgres
"""
    settings_path = temp_dir / "settings_invalid.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture(autouse=True)
def reset_settings():
    """Settings 싱글턴 초기화 (테스트 간 격리)"""
    Settings.reset()
    yield
    Settings.reset()


# -------------------------------------------------------------------------
# Ledger fixture
# -------------------------------------------------------------------------

@pytest.fixture
def memory_store() -> InMemoryLedgerStore:
    """메모리 저장소 (짧은 잠금 상한)"""
    return InMemoryLedgerStore(lock_timeout_sec=0.2)


@pytest.fixture
def memory_service(memory_store: InMemoryLedgerStore) -> LedgerService:
    return LedgerService(memory_store)


@pytest_asyncio.fixture
async def ledger_db(temp_dir: Path) -> SQLiteAdapter:
    """스키마가 초기화된 임시 SQLite DB"""
    adapter = SQLiteAdapter(
        temp_dir / "test_ledger.db",
        busy_timeout_ms=200,
        lock_timeout_sec=0.5,
    )
    await adapter.connect()
    await init_ledger_schema(adapter)
    yield adapter
    await adapter.close()


@pytest.fixture
def sqlite_store(ledger_db: SQLiteAdapter) -> LedgerStore:
    return LedgerStore(ledger_db)


@pytest.fixture
def sqlite_service(sqlite_store: LedgerStore) -> LedgerService:
    return LedgerService(sqlite_store)


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def service(request: pytest.FixtureRequest, temp_dir: Path) -> LedgerService:
    """두 저장소 구현체 모두에 대해 실행"""
    if request.param == "memory":
        yield LedgerService(InMemoryLedgerStore(lock_timeout_sec=0.2))
        return

    adapter = SQLiteAdapter(temp_dir / "service.db", busy_timeout_ms=200, lock_timeout_sec=0.5)
    await adapter.connect()
    await init_ledger_schema(adapter)
    yield LedgerService(LedgerStore(adapter))
    await adapter.close()
