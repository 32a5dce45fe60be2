"""
HRA exemption evaluator — least-of-three rule, month by month.

Negative amounts are clamped to zero before the rule is applied; this is the
only calculator that clamps instead of raising.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Union

from taxengine.calculators.hra.schemas import (
    MAX_MONTHS,
    HraAnnualSummary,
    HraMonthInput,
    HraMonthResult,
    HraSchedule,
)
from taxengine.errors import InvalidInput
from taxengine.money import ZERO, clamp_non_negative

logger = logging.getLogger(__name__)


def calculate_monthly_exemption(month_input: Union[HraMonthInput, dict]) -> HraMonthResult:
    """
    Exempt and taxable HRA for one month.

    Accepts an HraMonthInput or a plain dict with the same keys.
    """
    if not isinstance(month_input, HraMonthInput):
        month_input = HraMonthInput.model_validate(month_input)

    return HraMonthResult(
        month=month_input.month,
        salary=clamp_non_negative(month_input.salary),
        hra_received=clamp_non_negative(month_input.hra_received),
        rent_paid=clamp_non_negative(month_input.rent_paid),
        is_metro=month_input.is_metro,
    )


def calculate_annual_summary(rows: Iterable[Union[HraMonthResult, dict]]) -> HraAnnualSummary:
    """
    Field-wise sum of monthly rows. Row order does not affect the totals.

    Raises:
        InvalidInput: more than twelve rows.
    """
    rows = [
        row if isinstance(row, HraMonthResult) else HraMonthResult.model_validate(row)
        for row in rows
    ]
    if len(rows) > MAX_MONTHS:
        raise InvalidInput("months", len(rows), f"at most {MAX_MONTHS} months per financial year")

    total_salary = total_hra = total_rent = total_exemption = total_taxable = ZERO
    for row in rows:
        total_salary += row.salary
        total_hra += row.hra_received
        total_rent += row.rent_paid
        total_exemption += row.exemption
        total_taxable += row.taxable

    return HraAnnualSummary(
        months=len(rows),
        total_salary=total_salary,
        total_hra=total_hra,
        total_rent=total_rent,
        total_exemption=total_exemption,
        total_taxable=total_taxable,
    )


def calculate_hra_schedule(inputs: Iterable[Union[HraMonthInput, dict]]) -> HraSchedule:
    """
    Evaluate up to twelve months and summarise them.

    Raises:
        InvalidInput: more than twelve months, or the same month given twice.
    """
    rows: List[HraMonthResult] = [calculate_monthly_exemption(i) for i in inputs]
    if len(rows) > MAX_MONTHS:
        raise InvalidInput("months", len(rows), f"at most {MAX_MONTHS} months per financial year")

    seen = set()
    for row in rows:
        if row.month in seen:
            raise InvalidInput("months", row.month.value, "month given more than once")
        seen.add(row.month)

    logger.debug("HRA schedule evaluated months=%d", len(rows))
    return HraSchedule(rows=rows, summary=calculate_annual_summary(rows))
