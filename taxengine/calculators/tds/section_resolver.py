"""
TDS / TCS section resolver — deduction (or collection) for one payment.

Threshold test is a strict less-than: a payment equal to the threshold is
subject to deduction. A section without a threshold always applies.
Amounts are rounded to the whole rupee.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional, Union

from taxengine.calculators.tds.schemas import TdsResult
from taxengine.errors import InvalidInput
from taxengine.money import ZERO, Number, non_negative, to_rupee
from taxengine.rate_tables.loader import get_rate_table
from taxengine.rate_tables.schemas import Residency, TaxCategory, TdsSection

logger = logging.getLogger(__name__)

BELOW_THRESHOLD = "below threshold"

_NO_PAN_PROVISION = {
    TaxCategory.tds: "Section 206AA",
    TaxCategory.tcs: "Section 206CC",
}


def _percent(rate: Decimal) -> str:
    # 0.001 → "0.1", 0.10 → "10"
    return format((rate * 100).quantize(Decimal("0.01")).normalize(), "f")


def _reason(section: TdsSection, rate: Decimal, pan_available: bool) -> str:
    reason = f"{section.category.value} at {_percent(rate)}%"
    if not pan_available:
        reason += f" (PAN not available, {_NO_PAN_PROVISION[section.category]} rate)"
    return reason


def resolve_section(
    section: Union[TdsSection, str], *, financial_year: Optional[str] = None
) -> TdsSection:
    if isinstance(section, TdsSection):
        return section
    return get_rate_table(financial_year).section(section)


def resolve_tds(
    payment_amount: Number,
    section: Union[TdsSection, str],
    pan_available: bool,
    *,
    financial_year: Optional[str] = None,
) -> TdsResult:
    """
    TDS/TCS on one payment.

    Args:
        payment_amount: Gross payment (or sale consideration for TCS), >= 0.
        section:        A TdsSection, or a section code looked up in the rate table.
        pan_available:  False applies the higher no-PAN rate (206AA / 206CC).

    Raises:
        InvalidInput: payment_amount negative / non-finite, or pan_available not a bool.
        NotFound: unknown section code or financial year.
    """
    amount = non_negative(payment_amount, "payment_amount")
    if not isinstance(pan_available, bool):
        raise InvalidInput("pan_available", pan_available, "must be a boolean")
    config = resolve_section(section, financial_year=financial_year)

    if config.threshold is not None and amount < config.threshold:
        result = TdsResult(
            section_code=config.code,
            category=config.category,
            payment_amount=amount,
            pan_available=pan_available,
            applicable=False,
            rate=ZERO,
            tds_amount=ZERO,
            net_amount=amount,
            reason=BELOW_THRESHOLD,
        )
    else:
        rate = config.base_rate if pan_available else config.no_pan_rate
        tds_amount = to_rupee(amount * rate)
        result = TdsResult(
            section_code=config.code,
            category=config.category,
            payment_amount=amount,
            pan_available=pan_available,
            applicable=True,
            rate=rate,
            tds_amount=tds_amount,
            net_amount=amount - tds_amount,
            reason=_reason(config, rate, pan_available),
        )

    logger.debug(
        "TDS resolved section=%s applicable=%s pan_available=%s",
        result.section_code,
        result.applicable,
        result.pan_available,
    )
    return result


def list_sections(
    *,
    category: Optional[Union[TaxCategory, str]] = None,
    residency: Optional[Union[Residency, str]] = None,
    financial_year: Optional[str] = None,
) -> List[TdsSection]:
    """Sections of the financial year's table, in table order, optionally filtered."""
    try:
        wanted_category = TaxCategory(category) if category is not None else None
    except ValueError:
        raise InvalidInput(
            "category", category, f"must be one of {[c.value for c in TaxCategory]}"
        ) from None
    try:
        wanted_residency = Residency(residency) if residency is not None else None
    except ValueError:
        raise InvalidInput(
            "residency", residency, f"must be one of {[r.value for r in Residency]}"
        ) from None

    return [
        s for s in get_rate_table(financial_year).tds_sections
        if (wanted_category is None or s.category == wanted_category)
        and (wanted_residency is None or s.residency == wanted_residency)
    ]
