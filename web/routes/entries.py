"""
분개 항목 라우트

GET /api/entries/{entry_id} - 분개 항목 단건 조회
"""

from fastapi import APIRouter, Depends, Path

from core.ledger.service import LedgerService
from web.dependencies import get_ledger_service
from web.models.responses import EntryResponse

router = APIRouter(prefix="/api/entries", tags=["Entries"])


@router.get("/{entry_id}", response_model=EntryResponse)
async def get_entry(
    entry_id: int = Path(..., description="분개 항목 ID"),
    service: LedgerService = Depends(get_ledger_service),
) -> EntryResponse:
    """분개 항목 조회"""
    entry = await service.get_entry(entry_id)
    return EntryResponse.from_entry(entry)
