from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")


def to_price(value: Decimal | float | int | str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"price must be a decimal number, got {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"price must be finite, got {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_price(value: Decimal | float | int | str) -> str:
    return f"{to_price(value):.2f}"
