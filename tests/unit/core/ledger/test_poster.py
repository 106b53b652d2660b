"""TransactionPoster 테스트

저장소는 AsyncMock으로 대체하여 검증 순서와 커밋 요청만 확인.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from core.ledger.errors import (
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
    ValidationReason,
)
from core.ledger.models import MAX_AMOUNT, Account, BalanceAdjustment, EntryDraft
from core.ledger.poster import TransactionPoster, build_adjustments
from core.ledger.types import AccountType, JournalSide


NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def make_account(account_id: int, account_type: AccountType, balance: int = 0) -> Account:
    return Account(
        id=account_id,
        name=f"acct-{account_id}",
        account_type=account_type,
        balance=balance,
        created_at=NOW,
        updated_at=NOW,
    )


def debit(account_id: int, amount: int) -> EntryDraft:
    return EntryDraft(account_id=account_id, side=JournalSide.DEBIT, amount=amount)


def credit(account_id: int, amount: int) -> EntryDraft:
    return EntryDraft(account_id=account_id, side=JournalSide.CREDIT, amount=amount)


@pytest.fixture
def accounts() -> dict[int, Account]:
    """1: ASSET, 2: LIABILITY, 3: ASSET"""
    return {
        1: make_account(1, AccountType.ASSET),
        2: make_account(2, AccountType.LIABILITY),
        3: make_account(3, AccountType.ASSET),
    }


@pytest.fixture
def store(accounts: dict[int, Account]) -> AsyncMock:
    mock = AsyncMock()

    async def get_accounts_by_ids(ids):
        return {i: accounts[i] for i in set(ids) if i in accounts}

    mock.get_accounts_by_ids.side_effect = get_accounts_by_ids
    mock.commit_batch.return_value = ([], [])
    return mock


class TestBuildAdjustments:
    """build_adjustments 테스트"""

    def test_one_per_account(self, accounts: dict[int, Account]) -> None:
        """계정별 하나의 조정"""
        adjustments = build_adjustments([debit(1, 1234), credit(2, 1234)], accounts)

        assert adjustments == [
            BalanceAdjustment(account_id=1, account_type=AccountType.ASSET, delta=1234),
            BalanceAdjustment(account_id=2, account_type=AccountType.LIABILITY, delta=1234),
        ]

    def test_same_account_aggregated(self, accounts: dict[int, Account]) -> None:
        """같은 계정의 delta 합산"""
        drafts = [debit(1, 100), credit(1, 30), credit(2, 70)]

        adjustments = build_adjustments(drafts, accounts)

        assert [(a.account_id, a.delta) for a in adjustments] == [(1, 70), (2, 70)]

    def test_first_appearance_order(self, accounts: dict[int, Account]) -> None:
        """처음 등장한 순서 유지"""
        drafts = [credit(3, 5), debit(1, 5), debit(3, 1), credit(1, 1)]

        adjustments = build_adjustments(drafts, accounts)

        assert [a.account_id for a in adjustments] == [3, 1]
        assert [a.delta for a in adjustments] == [-4, 4]

    def test_carries_resolved_type(self, accounts: dict[int, Account]) -> None:
        """delta 계산에 사용한 계정 유형 포함"""
        adjustments = build_adjustments([debit(2, 10), credit(1, 10)], accounts)

        assert adjustments[0].account_type is AccountType.LIABILITY
        assert adjustments[0].delta == -10


class TestValidation:
    """검증 순서 테스트 (실패 시 커밋 없음)"""

    @pytest.mark.asyncio
    async def test_too_few_entries(self, store: AsyncMock) -> None:
        """항목 1개"""
        poster = TransactionPoster(store)

        with pytest.raises(ValidationError) as exc_info:
            await poster.post("tx", [debit(1, 100)])

        assert exc_info.value.reason == ValidationReason.TOO_FEW_ENTRIES
        store.commit_batch.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_entries(self, store: AsyncMock) -> None:
        """항목 없음"""
        poster = TransactionPoster(store)

        with pytest.raises(ValidationError) as exc_info:
            await poster.post("tx", [])

        assert exc_info.value.reason == ValidationReason.TOO_FEW_ENTRIES

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -5])
    async def test_non_positive_amount(self, store: AsyncMock, amount: int) -> None:
        """0 또는 음수 금액"""
        poster = TransactionPoster(store)

        with pytest.raises(ValidationError) as exc_info:
            await poster.post("tx", [debit(1, amount), credit(2, amount)])

        assert exc_info.value.reason == ValidationReason.NON_POSITIVE_AMOUNT
        store.get_accounts_by_ids.assert_not_called()
        store.commit_batch.assert_not_called()

    @pytest.mark.asyncio
    async def test_amount_above_int64(self, store: AsyncMock) -> None:
        """64비트 정수를 넘는 금액"""
        poster = TransactionPoster(store)

        with pytest.raises(ValidationError) as exc_info:
            await poster.post("tx", [debit(1, 2**63), credit(2, 2**63)])

        assert exc_info.value.reason == ValidationReason.AMOUNT_OUT_OF_RANGE
        store.get_accounts_by_ids.assert_not_called()
        store.commit_batch.assert_not_called()

    @pytest.mark.asyncio
    async def test_max_amount_accepted(self, store: AsyncMock) -> None:
        poster = TransactionPoster(store)

        await poster.post("tx", [debit(1, MAX_AMOUNT), credit(2, MAX_AMOUNT)])

        store.commit_batch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_account(self, store: AsyncMock) -> None:
        """존재하지 않는 계정"""
        poster = TransactionPoster(store)

        with pytest.raises(NotFoundError) as exc_info:
            await poster.post("tx", [debit(1, 100), credit(99, 100)])

        assert exc_info.value.account_ids == [99]
        store.commit_batch.assert_not_called()

    @pytest.mark.asyncio
    async def test_unbalanced(self, store: AsyncMock) -> None:
        """차변 != 대변"""
        poster = TransactionPoster(store)

        with pytest.raises(ValidationError) as exc_info:
            await poster.post("tx", [debit(1, 100), credit(2, 99)])

        assert exc_info.value.reason == ValidationReason.UNBALANCED_TRANSACTION
        store.commit_batch.assert_not_called()

    @pytest.mark.asyncio
    async def test_amount_checked_before_accounts(self, store: AsyncMock) -> None:
        """금액 검증이 계정 조회보다 먼저"""
        poster = TransactionPoster(store)

        with pytest.raises(ValidationError) as exc_info:
            await poster.post("tx", [debit(99, 0), credit(98, 0)])

        assert exc_info.value.reason == ValidationReason.NON_POSITIVE_AMOUNT

    @pytest.mark.asyncio
    async def test_accounts_checked_before_balance(self, store: AsyncMock) -> None:
        """계정 존재 검증이 차대 균형보다 먼저"""
        poster = TransactionPoster(store)

        with pytest.raises(NotFoundError):
            await poster.post("tx", [debit(1, 100), credit(99, 1)])

    @pytest.mark.asyncio
    async def test_single_batched_lookup(self, store: AsyncMock) -> None:
        """계정 조회는 한 번의 일괄 조회"""
        poster = TransactionPoster(store)

        await poster.post("tx", [debit(1, 50), debit(3, 50), credit(2, 100)])

        store.get_accounts_by_ids.assert_awaited_once()
        (ids,), _ = store.get_accounts_by_ids.call_args
        assert set(ids) == {1, 2, 3}


class TestCommit:
    """커밋 요청 테스트"""

    @pytest.mark.asyncio
    async def test_single_commit_batch(self, store: AsyncMock) -> None:
        """하나의 commit_batch로 전달"""
        poster = TransactionPoster(store)
        drafts = [debit(1, 1234), credit(2, 1234)]

        batch = await poster.post("tx-1", drafts)

        store.commit_batch.assert_awaited_once()
        transaction_id, sent_drafts, adjustments = store.commit_batch.call_args.args
        assert transaction_id == "tx-1"
        assert list(sent_drafts) == drafts
        assert [(a.account_id, a.delta) for a in adjustments] == [(1, 1234), (2, 1234)]
        assert batch.transaction_id == "tx-1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [ConflictError("busy"), StorageError("disk")])
    async def test_store_error_propagates(self, store: AsyncMock, error: Exception) -> None:
        """저장소 오류는 그대로 전파"""
        store.commit_batch.side_effect = error
        poster = TransactionPoster(store)

        with pytest.raises(type(error)):
            await poster.post("tx", [debit(1, 10), credit(2, 10)])
