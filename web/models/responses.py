"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화
"""

from datetime import datetime

from pydantic import BaseModel, Field

from core.ledger.models import Account, AccountLedger, BalanceDrift, Entry, PostedBatch


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    backend: str = Field(..., description="Ledger 저장소 (memory/sqlite)")
    version: str = Field(..., description="API 버전")


class ErrorResponse(BaseModel):
    """오류 응답"""

    error: str = Field(..., description="오류 종류")
    reason: str | None = Field(default=None, description="실패 사유 (검증 실패, 조회 실패)")
    detail: str = Field(..., description="상세 메시지")


class AccountResponse(BaseModel):
    """계정 응답"""

    id: int = Field(..., description="계정 ID")
    name: str | None = Field(default=None, description="계정 이름")
    account_type: str = Field(..., description="계정 유형")
    balance: int = Field(..., description="잔액 (최소 화폐 단위)")
    created_at: datetime = Field(..., description="생성 시간 (UTC)")
    updated_at: datetime = Field(..., description="마지막 변경 시간 (UTC)")

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            name=account.name,
            account_type=account.account_type.value,
            balance=account.balance,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class EntryResponse(BaseModel):
    """분개 항목 응답"""

    id: int = Field(..., description="항목 ID")
    transaction_id: str = Field(..., description="거래 그룹 키")
    account_id: int = Field(..., description="계정 ID")
    side: str = Field(..., description="DEBIT/CREDIT")
    amount: int = Field(..., description="금액")
    name: str | None = Field(default=None, description="항목 이름")
    description: str | None = Field(default=None, description="항목 설명")
    created_at: datetime = Field(..., description="생성 시간 (UTC)")
    updated_at: datetime = Field(..., description="변경 시간 (UTC)")

    @classmethod
    def from_entry(cls, entry: Entry) -> "EntryResponse":
        return cls(
            id=entry.id,
            transaction_id=entry.transaction_id,
            account_id=entry.account_id,
            side=entry.side.value,
            amount=entry.amount,
            name=entry.name,
            description=entry.description,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


class AccountDetailResponse(AccountResponse):
    """계정 상세 응답 (분개 항목 포함)"""

    entries: list[EntryResponse] = Field(default_factory=list, description="분개 항목 목록")

    @classmethod
    def from_ledger(cls, ledger: AccountLedger) -> "AccountDetailResponse":
        base = AccountResponse.from_account(ledger.account)
        return cls(
            **base.model_dump(),
            entries=[EntryResponse.from_entry(e) for e in ledger.entries],
        )


class PostedTransactionResponse(BaseModel):
    """거래 게시 응답"""

    transaction_id: str = Field(..., description="거래 그룹 키")
    entries: list[EntryResponse] = Field(..., description="생성된 분개 항목")
    accounts: list[AccountResponse] = Field(..., description="갱신 후 계정 스냅샷")

    @classmethod
    def from_batch(cls, batch: PostedBatch) -> "PostedTransactionResponse":
        return cls(
            transaction_id=batch.transaction_id,
            entries=[EntryResponse.from_entry(e) for e in batch.created_entries],
            accounts=[AccountResponse.from_account(a) for a in batch.updated_accounts],
        )


class BalanceDriftResponse(BaseModel):
    """잔액 불일치 응답"""

    account_id: int = Field(..., description="계정 ID")
    cached_balance: int = Field(..., description="저장된 잔액")
    derived_balance: int = Field(..., description="분개 재계산 잔액")
    difference: int = Field(..., description="cached - derived")

    @classmethod
    def from_drift(cls, drift: BalanceDrift) -> "BalanceDriftResponse":
        return cls(
            account_id=drift.account_id,
            cached_balance=drift.cached_balance,
            derived_balance=drift.derived_balance,
            difference=drift.difference,
        )


class ReconcileResponse(BaseModel):
    """정합성 검사 응답"""

    consistent: bool = Field(..., description="불일치 없음 여부")
    drifts: list[BalanceDriftResponse] = Field(default_factory=list, description="불일치 계정")
