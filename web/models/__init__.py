"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    CreateAccountRequest,
    EntryDraftRequest,
    PostTransactionRequest,
)
from web.models.responses import (
    AccountDetailResponse,
    AccountResponse,
    BalanceDriftResponse,
    EntryResponse,
    ErrorResponse,
    HealthResponse,
    PostedTransactionResponse,
    ReconcileResponse,
)

__all__ = [
    # Requests
    "CreateAccountRequest",
    "EntryDraftRequest",
    "PostTransactionRequest",
    # Responses
    "AccountDetailResponse",
    "AccountResponse",
    "BalanceDriftResponse",
    "EntryResponse",
    "ErrorResponse",
    "HealthResponse",
    "PostedTransactionResponse",
    "ReconcileResponse",
]
