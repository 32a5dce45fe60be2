"""
money.py — Decimal helpers shared by every calculator.

Rounding policy (single, uniform):
  - All arithmetic is exact Decimal. No intermediate rounding.
  - Result fields are rounded ONCE, when the result model is built:
      to_paise()  → 0.01, ROUND_HALF_UP   (income tax)
      to_rupee()  → 1,    ROUND_HALF_UP   (TDS/TCS amounts)
  - HRA values are left exact; exemption + taxable == hra_received holds
    without a rounding remainder.
  - Floats are converted through str() so 0.1 becomes Decimal("0.1"),
    not its binary expansion.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated, Union

from pydantic import PlainSerializer

from taxengine.errors import InvalidInput

ZERO = Decimal("0")
PAISE = Decimal("0.01")
RUPEE = Decimal("1")

Number = Union[int, float, Decimal]

# Decimal inside Python, exact fixed-point string on the wire ("1501500.34")
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: format(v, "f"), return_type=str, when_used="json"),
]
Rate = Money


def to_decimal(value: Number, field: str) -> Decimal:
    """Convert to Decimal, rejecting bool / NaN / infinity with InvalidInput."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidInput(field, value, "must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as exc:
        raise InvalidInput(field, value, "must be a number") from exc
    if not amount.is_finite():
        raise InvalidInput(field, value, "must be finite")
    return amount


def non_negative(value: Number, field: str) -> Decimal:
    """to_decimal() plus the >= 0 contract shared by slab, regime and TDS inputs."""
    amount = to_decimal(value, field)
    if amount < ZERO:
        raise InvalidInput(field, value, "must be >= 0")
    return amount


def clamp_non_negative(value: Decimal) -> Decimal:
    return value if value > ZERO else ZERO


def to_paise(value: Decimal) -> Decimal:
    return value.quantize(PAISE, rounding=ROUND_HALF_UP)


def to_rupee(value: Decimal) -> Decimal:
    return value.quantize(RUPEE, rounding=ROUND_HALF_UP)
