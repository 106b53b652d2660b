"""Ledger 타입 테스트"""

import pytest

from core.ledger.types import AccountType, BalanceDirection, JournalSide


class TestAccountType:
    """AccountType Enum 테스트"""

    def test_account_types(self) -> None:
        """계정 유형 확인"""
        assert AccountType.ASSET.value == "ASSET"
        assert AccountType.LIABILITY.value == "LIABILITY"
        assert AccountType.EQUITY.value == "EQUITY"
        assert AccountType.REVENUE.value == "REVENUE"
        assert AccountType.EXPENSE.value == "EXPENSE"

    def test_closed_set(self) -> None:
        """5대 계정 유형 외 값 거부"""
        assert len(AccountType) == 5
        with pytest.raises(ValueError):
            AccountType("INCOME")

    def test_str_comparison(self) -> None:
        # str(Enum)은 "EnumClass.VALUE" 형태로 반환되므로 value 사용
        assert AccountType.ASSET == "ASSET"


class TestJournalSide:
    """JournalSide Enum 테스트"""

    def test_sides(self) -> None:
        """차변/대변 확인"""
        assert JournalSide.DEBIT.value == "DEBIT"
        assert JournalSide.CREDIT.value == "CREDIT"

    def test_case_sensitive(self) -> None:
        with pytest.raises(ValueError):
            JournalSide("debit")


class TestBalanceDirection:
    """BalanceDirection Enum 테스트"""

    def test_sign(self) -> None:
        """부호 확인"""
        assert BalanceDirection.INCREMENT.sign == 1
        assert BalanceDirection.DECREMENT.sign == -1
