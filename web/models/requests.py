"""
요청 스키마 (Pydantic)

Web API 요청 데이터 형식 검증.
금액 양수, 항목 수, 차대 균형 같은 업무 규칙은 Ledger 코어에서 검증.
"""

from pydantic import BaseModel, Field

from core.ledger.models import MAX_AMOUNT, MAX_BALANCE, EntryDraft
from core.ledger.types import AccountType, JournalSide


class CreateAccountRequest(BaseModel):
    """계정 생성 요청"""

    name: str | None = Field(default=None, max_length=200, description="계정 이름")
    account_type: AccountType = Field(..., description="계정 유형 (ASSET, LIABILITY 등)")
    id: int | None = Field(default=None, ge=1, le=MAX_BALANCE, description="지정 계정 ID (없으면 자동 할당)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"name": "Cash", "account_type": "ASSET"},
                {"name": "Bank Loan", "account_type": "LIABILITY", "id": 100},
            ]
        }
    }


class EntryDraftRequest(BaseModel):
    """분개 항목 요청"""

    account_id: int = Field(..., description="대상 계정 ID")
    side: JournalSide = Field(..., description="DEBIT 또는 CREDIT")
    amount: int = Field(..., le=MAX_AMOUNT, description="금액 (최소 화폐 단위, 양수)")
    name: str | None = Field(default=None, max_length=200, description="항목 이름")
    description: str | None = Field(default=None, max_length=1000, description="항목 설명")

    def to_draft(self) -> EntryDraft:
        return EntryDraft(
            account_id=self.account_id,
            side=self.side,
            amount=self.amount,
            name=self.name,
            description=self.description,
        )


class PostTransactionRequest(BaseModel):
    """거래 게시 요청

    transaction_id를 생략하면 서버에서 uuid4로 생성.
    """

    transaction_id: str | None = Field(
        default=None,
        min_length=1,
        max_length=128,
        description="거래 그룹 키 (중복 게시는 409)",
    )
    entries: list[EntryDraftRequest] = Field(..., description="분개 항목 목록")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "transaction_id": "tx-20260101-0001",
                    "entries": [
                        {"account_id": 1, "side": "DEBIT", "amount": 1234},
                        {"account_id": 2, "side": "CREDIT", "amount": 1234},
                    ],
                }
            ]
        }
    }
