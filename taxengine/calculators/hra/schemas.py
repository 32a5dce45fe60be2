"""
schemas.py — HRA exemption data contracts (pydantic v2).

Section 10(13A) read with Rule 2A: the exemption is the least of
  1. actual HRA received
  2. rent paid minus 10% of salary (basic + DA)
  3. 50% of salary (metro) / 40% (non-metro)

HRA values are exact Decimal; no rounding is applied.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from taxengine.money import ZERO, Money


class MonthCode(str, Enum):
    """Months of the Indian financial year, April first."""
    APR = "APR"
    MAY = "MAY"
    JUN = "JUN"
    JUL = "JUL"
    AUG = "AUG"
    SEP = "SEP"
    OCT = "OCT"
    NOV = "NOV"
    DEC = "DEC"
    JAN = "JAN"
    FEB = "FEB"
    MAR = "MAR"


MONTHS: List[Tuple[MonthCode, str]] = [
    (MonthCode.APR, "April"),
    (MonthCode.MAY, "May"),
    (MonthCode.JUN, "June"),
    (MonthCode.JUL, "July"),
    (MonthCode.AUG, "August"),
    (MonthCode.SEP, "September"),
    (MonthCode.OCT, "October"),
    (MonthCode.NOV, "November"),
    (MonthCode.DEC, "December"),
    (MonthCode.JAN, "January"),
    (MonthCode.FEB, "February"),
    (MonthCode.MAR, "March"),
]

METRO_SALARY_SHARE = Decimal("0.50")
NON_METRO_SALARY_SHARE = Decimal("0.40")
RENT_SALARY_OFFSET = Decimal("0.10")
MAX_MONTHS = 12

_DERIVED_FIELDS = ("rent_minus_ten_percent", "salary_cap", "exemption", "taxable")


class HraMonthInput(BaseModel):
    """
    One month of salary, HRA and rent.

    Amounts are not range-checked here: negative values are clamped to zero by
    calculate_monthly_exemption. NaN / infinity are rejected by validation.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    month: MonthCode
    salary: Money = Field(..., description="Basic + DA for the month.")
    hra_received: Money
    rent_paid: Money
    is_metro: bool = False


class HraMonthResult(HraMonthInput):
    """
    HraMonthInput (after clamping) plus the derived exemption and taxable HRA.

    The derived fields are always recomputed. A dumped row validates back into
    an equal row: derived keys are accepted when they match the recomputed
    value and rejected when they do not.
    """

    salary: Money = Field(..., ge=0)
    hra_received: Money = Field(..., ge=0)
    rent_paid: Money = Field(..., ge=0)

    @model_validator(mode="wrap")
    @classmethod
    def _check_supplied_derived_fields(cls, data: Any, handler):
        supplied = {}
        if isinstance(data, dict):
            data = dict(data)
            for name in _DERIVED_FIELDS:
                if name in data:
                    supplied[name] = data.pop(name)

        row = handler(data)

        for name, value in supplied.items():
            expected = getattr(row, name)
            try:
                matches = Decimal(str(value)) == expected
            except InvalidOperation:
                matches = False
            if not matches:
                raise ValueError(f"{name} is derived: got {value!r}, computed {expected}")
        return row

    @computed_field
    @property
    def rent_minus_ten_percent(self) -> Money:
        excess = self.rent_paid - RENT_SALARY_OFFSET * self.salary
        return excess if excess > ZERO else ZERO

    @computed_field
    @property
    def salary_cap(self) -> Money:
        share = METRO_SALARY_SHARE if self.is_metro else NON_METRO_SALARY_SHARE
        return share * self.salary

    @computed_field
    @property
    def exemption(self) -> Money:
        return max(ZERO, min(self.hra_received, self.rent_minus_ten_percent, self.salary_cap))

    @computed_field
    @property
    def taxable(self) -> Money:
        return self.hra_received - self.exemption


class HraAnnualSummary(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    months: int = Field(..., ge=0, le=MAX_MONTHS)
    total_salary: Money
    total_hra: Money
    total_rent: Money
    total_exemption: Money
    total_taxable: Money


class HraSchedule(BaseModel):
    """Monthly rows in input order plus their annual summary."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    rows: List[HraMonthResult]
    summary: HraAnnualSummary


class HraScheduleRequest(BaseModel):
    """POST /api/hra/annual"""
    model_config = ConfigDict(extra="forbid")

    months: List[HraMonthInput] = Field(..., min_length=1, max_length=MAX_MONTHS)


__all__ = [
    "MonthCode",
    "MONTHS",
    "MAX_MONTHS",
    "HraMonthInput",
    "HraMonthResult",
    "HraAnnualSummary",
    "HraSchedule",
    "HraScheduleRequest",
]
