"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 구현체 교체 가능.
모든 Ledger 저장소 구현체는 이 Protocol을 준수해야 함.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from core.ledger.models import Account, BalanceAdjustment, Entry, EntryDraft
from core.ledger.types import AccountType


@runtime_checkable
class ILedgerStore(Protocol):
    """Ledger 저장소 인터페이스

    계정과 분개 항목의 영속 저장소.
    잔액은 commit_batch로만 변경되며 직접 쓰기 경로는 제공하지 않음.
    """

    # -------------------------------------------------------------------------
    # 계정
    # -------------------------------------------------------------------------

    async def create_account(
        self,
        name: str | None,
        account_type: AccountType,
        account_id: int | None = None,
    ) -> Account:
        """계정 생성 (잔액 0)

        Args:
            name: 계정 이름
            account_type: 계정 유형
            account_id: 지정 ID (None이면 자동 할당)

        Raises:
            DuplicateAccountError: account_id가 이미 존재하는 경우
        """
        ...

    async def get_account(self, account_id: int) -> Account | None:
        """계정 단건 조회 (없으면 None)"""
        ...

    async def get_accounts_by_ids(self, account_ids: Iterable[int]) -> dict[int, Account]:
        """계정 일괄 조회

        Returns:
            존재하는 계정만 포함한 {account_id: Account}
        """
        ...

    async def list_accounts(self) -> list[Account]:
        """전체 계정 (id 오름차순)"""
        ...

    # -------------------------------------------------------------------------
    # 분개
    # -------------------------------------------------------------------------

    async def list_entries(
        self,
        transaction_id: str | None = None,
        entry_id: int | None = None,
        account_id: int | None = None,
    ) -> list[Entry]:
        """분개 항목 조회 (커밋 순서 = id 오름차순)

        필터를 지정하지 않으면 전체 조회.
        """
        ...

    async def read_ledger(
        self, account_id: int | None = None
    ) -> tuple[list[Account], list[Entry]]:
        """계정과 분개를 같은 커밋 시점으로 조회

        두 목록 사이에 다른 커밋이 끼어들지 않음.
        account_id를 지정하면 해당 계정(없으면 빈 목록)과 그 계정의 분개만.

        Returns:
            (Account 목록 id 오름차순, Entry 목록 커밋 순서)
        """
        ...

    async def commit_batch(
        self,
        transaction_id: str,
        drafts: Sequence[EntryDraft],
        adjustments: Sequence[BalanceAdjustment],
    ) -> tuple[list[Entry], list[Account]]:
        """분개 생성 + 잔액 조정을 하나의 원자적 단위로 커밋

        계정이 겹치는 동시 커밋은 계정 단위로 직렬화되고,
        겹치지 않는 커밋은 독립적으로 진행됨.

        Returns:
            (생성된 Entry 목록, 갱신 후 Account 스냅샷 목록)

        Raises:
            DuplicateTransactionError: transaction_id가 이미 게시된 경우
            NotFoundError: 커밋 시점에 계정이 없는 경우
            ConflictError: 잠금 대기 상한 초과 또는 계정 유형 변경
            StorageError: 저장소 커밋 실패
        """
        ...
