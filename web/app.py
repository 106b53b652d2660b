"""
FastAPI 애플리케이션

라우터 등록, Ledger 초기화, 예외 → HTTP 응답 매핑.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.memory.ledger_store import InMemoryLedgerStore
from core.config.loader import Settings, get_settings
from core.ledger.errors import (
    ConflictError,
    DuplicateError,
    LedgerError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from core.ledger.schema import init_ledger_schema
from core.ledger.service import LedgerService
from core.ledger.store import LedgerStore
from core.logging import setup_logging
from core.types import StoreBackend
from web.dependencies import set_ledger_service
from web.models.responses import ErrorResponse
from web.routes import accounts, entries, health, ledger, transactions

logger = logging.getLogger(__name__)

# 예외 → HTTP 상태 코드 (위에서부터 매칭)
ERROR_STATUS_CODES: list[tuple[type[LedgerError], int]] = [
    (ValidationError, 422),
    (NotFoundError, 404),
    (DuplicateError, 409),
    (ConflictError, 409),
    (StorageError, 503),
]


def status_code_for(error: LedgerError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


async def _init_ledger_service(
    settings: Settings,
) -> tuple[LedgerService, SQLiteAdapter | None]:
    """설정된 backend로 LedgerService 생성

    Returns:
        (LedgerService, SQLiteAdapter | None) - 메모리 backend면 DB 없음
    """
    if settings.backend == StoreBackend.MEMORY:
        logger.info("Ledger: in-memory store")
        return LedgerService(InMemoryLedgerStore(settings.lock_timeout_sec)), None

    db = SQLiteAdapter(
        settings.db_path,
        busy_timeout_ms=settings.busy_timeout_ms,
        lock_timeout_sec=settings.lock_timeout_sec,
    )
    await db.connect()
    await init_ledger_schema(db)
    logger.info(f"Ledger: sqlite store ({settings.db_path})")
    return LedgerService(LedgerStore(db)), db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    settings = get_settings()
    setup_logging("web", settings.log_level, settings.log_level)

    service, db = await _init_ledger_service(settings)
    set_ledger_service(service)

    yield

    # 종료 시 - 리소스 정리
    set_ledger_service(None)
    if db is not None:
        await db.close()
        logger.info("Web: DB 연결 종료 완료")


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """LedgerError → ErrorResponse"""
    status_code = status_code_for(exc)
    reason = exc.reason.value if isinstance(exc, (ValidationError, NotFoundError)) else None

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")

    body = ErrorResponse(error=type(exc).__name__, reason=reason, detail=str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app() -> FastAPI:
    """FastAPI 앱 생성"""
    app = FastAPI(
        title="Ledger API",
        description="복식부기 거래 게시 API",
        version=health.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS 설정 (개발용)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LedgerError, ledger_error_handler)

    # =========================================================================
    # API 라우터 등록
    # =========================================================================

    app.include_router(health.router)
    app.include_router(accounts.router)
    app.include_router(transactions.router)
    app.include_router(entries.router)
    app.include_router(ledger.router)

    return app


app = create_app()
