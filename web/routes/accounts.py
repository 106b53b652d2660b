"""
계정 라우트

계정 생성 및 조회 API
"""

from fastapi import APIRouter, Depends, Path

from core.ledger.service import LedgerService
from web.dependencies import get_ledger_service
from web.models.requests import CreateAccountRequest
from web.models.responses import AccountDetailResponse, AccountResponse

router = APIRouter(prefix="/api/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
async def create_account(
    request: CreateAccountRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> AccountResponse:
    """계정 생성 (잔액 0)"""
    account = await service.create_account(
        name=request.name,
        account_type=request.account_type,
        account_id=request.id,
    )
    return AccountResponse.from_account(account)


@router.get("", response_model=list[AccountResponse])
async def list_accounts(
    service: LedgerService = Depends(get_ledger_service),
) -> list[AccountResponse]:
    """전체 계정 조회"""
    accounts = await service.list_accounts()
    return [AccountResponse.from_account(a) for a in accounts]


@router.get("/{account_id}", response_model=AccountDetailResponse)
async def get_account(
    account_id: int = Path(..., description="계정 ID"),
    service: LedgerService = Depends(get_ledger_service),
) -> AccountDetailResponse:
    """계정 조회 (분개 항목 포함)"""
    ledger = await service.get_account_with_entries(account_id)
    return AccountDetailResponse.from_ledger(ledger)
