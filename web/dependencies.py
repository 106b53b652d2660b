"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

from fastapi import HTTPException

from core.config.loader import Settings, get_settings
from core.ledger.service import LedgerService


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


# =========================================================================
# LedgerService (앱 수명 동안 공유)
# =========================================================================

# lifespan에서 설정되는 전역 LedgerService 인스턴스
_ledger_service: LedgerService | None = None


def set_ledger_service(service: LedgerService | None) -> None:
    """LedgerService 설정

    앱 시작 시 호출하여 전역 인스턴스 설정. 종료 시 None.

    Args:
        service: LedgerService 인스턴스
    """
    global _ledger_service
    _ledger_service = service


def get_ledger_service() -> LedgerService:
    """LedgerService 반환

    Raises:
        HTTPException: 초기화 전 (503)
    """
    if _ledger_service is None:
        raise HTTPException(status_code=503, detail="Ledger is not initialized")
    return _ledger_service
