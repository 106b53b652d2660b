"""
설정 로더

settings.yaml 로드 및 Ledger 실행 설정 생성
"""

from dataclasses import dataclass
from pathlib import Path

import yaml

from core.constants import PROJECT_ROOT, Defaults, Paths
from core.types import StoreBackend


@dataclass(frozen=True)
class LedgerSettings:
    """Ledger 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    backend: StoreBackend
    db_path: Path
    lock_timeout_sec: float = Defaults.LOCK_TIMEOUT_SEC
    busy_timeout_ms: int = Defaults.BUSY_TIMEOUT_MS
    log_level: str = Defaults.LOG_LEVEL
    web_host: str = Defaults.WEB_HOST
    web_port: int = Defaults.WEB_PORT


class SettingsLoadError(Exception):
    """Settings 로드 실패 예외"""

    pass


def _resolve_db_path(raw: str | None) -> Path:
    """DB 경로 해석

    상대 경로는 PROJECT_ROOT 기준. ":memory:"는 그대로 유지.
    """
    if not raw:
        return Paths.LEDGER_DB
    if raw == ":memory:":
        return Path(raw)

    path = Path(raw)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def load_settings(path: Path | None = None) -> LedgerSettings:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        LedgerSettings 인스턴스

    Raises:
        SettingsLoadError: 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 backend 또는 timeout인 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        raise SettingsLoadError(f"settings.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SettingsLoadError("settings.yaml이 비어 있습니다")

    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    # ledger 섹션
    ledger_config = data.get("ledger") or {}

    backend_str = ledger_config.get("backend", Defaults.BACKEND)
    try:
        backend = StoreBackend(str(backend_str).lower())
    except ValueError as e:
        valid_backends = [b.value for b in StoreBackend]
        raise ValueError(
            f"유효하지 않은 backend입니다: '{backend_str}'. "
            f"유효한 값: {valid_backends}"
        ) from e

    lock_timeout_sec = float(
        ledger_config.get("lock_timeout_sec", Defaults.LOCK_TIMEOUT_SEC)
    )
    busy_timeout_ms = int(
        ledger_config.get("busy_timeout_ms", Defaults.BUSY_TIMEOUT_MS)
    )

    if lock_timeout_sec <= 0:
        raise ValueError(f"lock_timeout_sec는 0보다 커야 합니다: {lock_timeout_sec}")
    if busy_timeout_ms < 0:
        raise ValueError(f"busy_timeout_ms는 음수일 수 없습니다: {busy_timeout_ms}")

    # logging / web 섹션 (선택)
    logging_config = data.get("logging") or {}
    web_config = data.get("web") or {}

    return LedgerSettings(
        backend=backend,
        db_path=_resolve_db_path(ledger_config.get("db_path")),
        lock_timeout_sec=lock_timeout_sec,
        busy_timeout_ms=busy_timeout_ms,
        log_level=str(logging_config.get("level", Defaults.LOG_LEVEL)).upper(),
        web_host=web_config.get("host", Defaults.WEB_HOST),
        web_port=int(web_config.get("port", Defaults.WEB_PORT)),
    )


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _settings: LedgerSettings | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._settings is None:
            self._settings = load_settings(settings_path)

    @property
    def backend(self) -> StoreBackend:
        """Ledger 저장소 구현체"""
        assert self._settings is not None
        return self._settings.backend

    @property
    def db_path(self) -> Path:
        """SQLite DB 경로"""
        assert self._settings is not None
        return self._settings.db_path

    @property
    def lock_timeout_sec(self) -> float:
        """잠금 대기 상한 (초)"""
        assert self._settings is not None
        return self._settings.lock_timeout_sec

    @property
    def busy_timeout_ms(self) -> int:
        """SQLite busy_timeout (밀리초)"""
        assert self._settings is not None
        return self._settings.busy_timeout_ms

    @property
    def log_level(self) -> str:
        """로그 레벨"""
        assert self._settings is not None
        return self._settings.log_level

    @property
    def web_host(self) -> str:
        assert self._settings is not None
        return self._settings.web_host

    @property
    def web_port(self) -> int:
        assert self._settings is not None
        return self._settings.web_port

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._settings = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
