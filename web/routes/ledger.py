"""
복식부기 API 라우트

Ledger 정합성 검사
"""

from fastapi import APIRouter, Depends

from core.ledger.service import LedgerService
from web.dependencies import get_ledger_service
from web.models.responses import BalanceDriftResponse, ReconcileResponse

router = APIRouter(prefix="/api/ledger", tags=["Ledger"])


@router.get("/reconcile", response_model=ReconcileResponse)
async def reconcile(
    service: LedgerService = Depends(get_ledger_service),
) -> ReconcileResponse:
    """잔액 정합성 검사

    account.balance와 분개 재계산 잔액이 다른 계정 목록.
    """
    drifts = await service.reconcile()
    return ReconcileResponse(
        consistent=not drifts,
        drifts=[BalanceDriftResponse.from_drift(d) for d in drifts],
    )
