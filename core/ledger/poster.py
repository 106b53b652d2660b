"""
분개 게시기

EntryDraft 묶음을 검증하고 계정별 잔액 조정으로 변환하여
저장소에 하나의 원자적 배치로 커밋.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from core.ledger.direction import signed_delta
from core.ledger.errors import NotFoundError, ValidationError, ValidationReason
from core.ledger.models import MAX_AMOUNT, Account, BalanceAdjustment, EntryDraft, PostedBatch
from core.ledger.types import JournalSide

if TYPE_CHECKING:
    from adapters.interfaces import ILedgerStore

logger = logging.getLogger(__name__)


# 한 거래의 최소 분개 항목 수
MIN_ENTRIES = 2


def build_adjustments(
    drafts: Sequence[EntryDraft],
    accounts: Mapping[int, Account],
) -> list[BalanceAdjustment]:
    """EntryDraft → 계정별 BalanceAdjustment

    같은 계정을 향한 항목은 delta를 합산하여 하나로 만듦.
    순서는 계정이 처음 등장한 순서.
    """
    deltas: dict[int, int] = {}
    for draft in drafts:
        account = accounts[draft.account_id]
        delta = signed_delta(account.account_type, draft.side, draft.amount)
        deltas[draft.account_id] = deltas.get(draft.account_id, 0) + delta

    return [
        BalanceAdjustment(
            account_id=account_id,
            account_type=accounts[account_id].account_type,
            delta=delta,
        )
        for account_id, delta in deltas.items()
    ]


class TransactionPoster:
    """거래 게시기

    검증 순서 (첫 실패에서 중단, 저장소 쓰기 없음):
    1. 항목 수 >= 2 (TOO_FEW_ENTRIES)
    2. 모든 amount > 0 (NON_POSITIVE_AMOUNT), <= MAX_AMOUNT (AMOUNT_OUT_OF_RANGE)
    3. 참조 계정 존재 (NotFoundError)
    4. 차변 합계 == 대변 합계 (UNBALANCED_TRANSACTION)

    저장소 오류(ConflictError, StorageError 등)는 그대로 전파.
    재시도는 호출자 책임.

    Args:
        store: ILedgerStore 구현체
    """

    def __init__(self, store: ILedgerStore):
        self.store = store

    async def post(
        self,
        transaction_id: str,
        entries: Sequence[EntryDraft],
    ) -> PostedBatch:
        """거래 게시

        Args:
            transaction_id: 거래 그룹 키
            entries: 분개 항목 초안

        Returns:
            PostedBatch (생성된 Entry, 갱신 후 Account 스냅샷)
        """
        drafts = list(entries)

        self._check_entry_count(drafts)
        self._check_amounts(drafts)

        account_ids = {draft.account_id for draft in drafts}
        accounts = await self.store.get_accounts_by_ids(account_ids)
        missing = account_ids - accounts.keys()
        if missing:
            raise NotFoundError(missing)

        self._check_balanced(drafts)

        adjustments = build_adjustments(drafts, accounts)

        created_entries, updated_accounts = await self.store.commit_batch(
            transaction_id, drafts, adjustments
        )

        logger.info(
            f"Posted transaction {transaction_id}: "
            f"{len(created_entries)} entries, {len(updated_accounts)} accounts",
            extra={"transaction_id": transaction_id},
        )

        return PostedBatch(
            transaction_id=transaction_id,
            created_entries=created_entries,
            updated_accounts=updated_accounts,
        )

    @staticmethod
    def _check_entry_count(drafts: list[EntryDraft]) -> None:
        if len(drafts) < MIN_ENTRIES:
            raise ValidationError(
                ValidationReason.TOO_FEW_ENTRIES,
                f"Transaction needs at least {MIN_ENTRIES} entries, got {len(drafts)}",
            )

    @staticmethod
    def _check_amounts(drafts: list[EntryDraft]) -> None:
        for index, draft in enumerate(drafts):
            if draft.amount <= 0:
                raise ValidationError(
                    ValidationReason.NON_POSITIVE_AMOUNT,
                    f"Entry #{index} amount must be positive, got {draft.amount}",
                )
            if draft.amount > MAX_AMOUNT:
                raise ValidationError(
                    ValidationReason.AMOUNT_OUT_OF_RANGE,
                    f"Entry #{index} amount exceeds {MAX_AMOUNT}, got {draft.amount}",
                )

    @staticmethod
    def _check_balanced(drafts: list[EntryDraft]) -> None:
        total_debit = sum(d.amount for d in drafts if d.side == JournalSide.DEBIT)
        total_credit = sum(d.amount for d in drafts if d.side == JournalSide.CREDIT)

        if total_debit != total_credit:
            raise ValidationError(
                ValidationReason.UNBALANCED_TRANSACTION,
                f"Debits ({total_debit}) do not equal credits ({total_credit})",
            )
