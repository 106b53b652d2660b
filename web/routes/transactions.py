"""
거래 라우트

거래 게시 및 거래별 분개 조회 API
"""

import logging
from uuid import uuid4

from fastapi import APIRouter, Depends, Path

from core.ledger.service import LedgerService
from web.dependencies import get_ledger_service
from web.models.requests import PostTransactionRequest
from web.models.responses import EntryResponse, PostedTransactionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])


@router.post("", response_model=PostedTransactionResponse, status_code=201)
async def post_transaction(
    request: PostTransactionRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> PostedTransactionResponse:
    """거래 게시

    검증 실패 422, 계정 없음 404, 중복/충돌 409, 저장소 오류 503.
    어떤 실패도 Ledger 상태를 변경하지 않음.
    """
    transaction_id = request.transaction_id
    if transaction_id is None:
        transaction_id = str(uuid4())
        logger.debug(f"transaction_id 생성: {transaction_id}")

    batch = await service.post_transaction(
        transaction_id,
        [entry.to_draft() for entry in request.entries],
    )
    return PostedTransactionResponse.from_batch(batch)


@router.get("", response_model=list[EntryResponse])
async def list_entries(
    service: LedgerService = Depends(get_ledger_service),
) -> list[EntryResponse]:
    """전체 분개 항목 (커밋 순서)"""
    entries = await service.list_entries()
    return [EntryResponse.from_entry(e) for e in entries]


@router.get("/{transaction_id}", response_model=list[EntryResponse])
async def get_transaction_entries(
    transaction_id: str = Path(..., description="거래 그룹 키"),
    service: LedgerService = Depends(get_ledger_service),
) -> list[EntryResponse]:
    """거래별 분개 항목 (없으면 빈 목록)"""
    entries = await service.list_entries_by_transaction(transaction_id)
    return [EntryResponse.from_entry(e) for e in entries]
