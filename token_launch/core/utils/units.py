from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation

from token_launch.core.constants import TOKEN_DECIMALS


def _to_decimal(value: str | int | float | Decimal) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Decimal(value)
    return Decimal(str(value).strip())


def to_base_units(
    amount: str | int | float | Decimal, decimals: int = TOKEN_DECIMALS
) -> int:
    """Human token amount -> integer base units, truncating extra precision."""
    try:
        amt = _to_decimal(amount)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid token amount: {amount}") from exc
    if not amt.is_finite():
        raise ValueError(f"Invalid token amount: {amount}")
    if amt < 0:
        raise ValueError("Amount must be non-negative")
    if decimals < 0:
        raise ValueError("Decimals must be non-negative")
    scale = Decimal(10) ** int(decimals)
    return int((amt * scale).to_integral_value(rounding=ROUND_DOWN))


def to_wei_eth(amount_eth: str | int | float | Decimal) -> int:
    return to_base_units(amount_eth, 18)


def format_base_units(amount: int, decimals: int = TOKEN_DECIMALS) -> str:
    """Integer base units -> shortest human decimal string ("1.5", "100")."""
    if amount < 0:
        raise ValueError("Amount must be non-negative")
    digits = str(int(amount)).rjust(decimals + 1, "0")
    whole, frac = digits[: len(digits) - decimals], digits[len(digits) - decimals :]
    frac = frac.rstrip("0")
    return f"{whole}.{frac}" if frac else whole
