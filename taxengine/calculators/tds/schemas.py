"""
schemas.py — TDS/TCS data contracts (pydantic v2).

Defines:
  - TdsResult   (outcome of resolve_tds for one payment)
  - TdsRequest  (POST /api/tds body)

The section catalogue itself (TdsSection) lives with the rate tables.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from taxengine.money import Money, Rate
from taxengine.rate_tables.schemas import TaxCategory


class TdsResult(BaseModel):
    """
    applicable=False → payment below the section threshold: rate, tds_amount = 0
    and net_amount = payment_amount.

    tds_amount is rounded to the whole rupee; net_amount = payment_amount - tds_amount.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    section_code: str
    category: TaxCategory
    payment_amount: Money
    pan_available: bool
    applicable: bool
    rate: Rate
    tds_amount: Money
    net_amount: Money
    reason: str


class TdsRequest(BaseModel):
    """payment_amount is range-checked by the engine (InvalidInput → 422)."""
    model_config = ConfigDict(extra="forbid")

    payment_amount: Decimal
    section_code: str = Field(..., min_length=1, description="e.g. '194J_PROF', '206C_1H'.")
    pan_available: bool = True
    financial_year: Optional[str] = None


__all__ = ["TdsResult", "TdsRequest"]
