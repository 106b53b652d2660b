"""
잔액 방향 결정

계정 유형과 차변/대변으로부터 잔액 증감 방향을 결정하는 순수 함수.

정상 잔액(normal balance) 규칙:
- ASSET, EXPENSE: Debit 증가 / Credit 감소
- LIABILITY, EQUITY, REVENUE: Credit 증가 / Debit 감소
"""

from core.ledger.errors import ValidationError, ValidationReason
from core.ledger.models import MAX_BALANCE, MIN_BALANCE
from core.ledger.types import AccountType, BalanceDirection, JournalSide


# 계정 유형별 정상 잔액 방향 (이 방향의 분개가 잔액을 증가시킴)
NORMAL_BALANCE_SIDE: dict[AccountType, JournalSide] = {
    AccountType.ASSET: JournalSide.DEBIT,
    AccountType.EXPENSE: JournalSide.DEBIT,
    AccountType.LIABILITY: JournalSide.CREDIT,
    AccountType.EQUITY: JournalSide.CREDIT,
    AccountType.REVENUE: JournalSide.CREDIT,
}


def _coerce(account_type: AccountType | str, side: JournalSide | str) -> tuple[AccountType, JournalSide]:
    try:
        return AccountType(account_type), JournalSide(side)
    except ValueError as e:
        raise ValidationError(
            ValidationReason.UNKNOWN_DIRECTION_FOR_ACCOUNT_TYPE,
            f"No balance direction for account_type={account_type!r}, side={side!r}",
        ) from e


def resolve_direction(
    account_type: AccountType | str,
    side: JournalSide | str,
) -> BalanceDirection:
    """잔액 증감 방향 결정

    Args:
        account_type: 계정 유형
        side: DEBIT 또는 CREDIT

    Returns:
        INCREMENT 또는 DECREMENT

    Raises:
        ValidationError: 규칙 표에 없는 조합 (UNKNOWN_DIRECTION_FOR_ACCOUNT_TYPE)
    """
    account_type, side = _coerce(account_type, side)

    normal_side = NORMAL_BALANCE_SIDE.get(account_type)
    if normal_side is None:
        raise ValidationError(
            ValidationReason.UNKNOWN_DIRECTION_FOR_ACCOUNT_TYPE,
            f"No normal balance defined for account_type={account_type.value}",
        )

    if side is normal_side:
        return BalanceDirection.INCREMENT
    return BalanceDirection.DECREMENT


def signed_delta(
    account_type: AccountType | str,
    side: JournalSide | str,
    amount: int,
) -> int:
    """부호가 적용된 잔액 변동량"""
    return resolve_direction(account_type, side).sign * amount


def apply_delta(account_id: int, balance: int, delta: int) -> int:
    """잔액에 delta 적용 (64비트 범위 확인)

    저장소는 커밋 구간 안에서 이 결과로 범위를 확인한 뒤에만 쓰기를 시작함.

    Raises:
        ValidationError: 결과 또는 delta가 범위 밖 (BALANCE_OUT_OF_RANGE)
    """
    new_balance = balance + delta
    if not (MIN_BALANCE <= delta <= MAX_BALANCE and MIN_BALANCE <= new_balance <= MAX_BALANCE):
        raise ValidationError(
            ValidationReason.BALANCE_OUT_OF_RANGE,
            f"Account {account_id} balance {balance} + {delta} is outside "
            f"[{MIN_BALANCE}, {MAX_BALANCE}]",
        )
    return new_balance
