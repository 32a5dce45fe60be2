"""
schemas.py — income tax data contracts (pydantic v2).

Defines:
  - AgeBracket, RegimeName enums
  - IncomeTaxResult        (one regime: slab tax → 87A → surcharge → cess)
  - RegimeComparison       (both regimes + recommendation)
  - IncomeHeads, Deductions (inputs of the total-income layer)
  - TotalIncomeTaxResult   (heads → deductions → slab + special-rate tax)
  - TotalIncomeComparison
  - IncomeTaxRequest, RegimeComparisonRequest,
    TotalIncomeTaxRequest, TotalIncomeComparisonRequest  (HTTP bodies)

All monetary fields are Decimal rounded to paise; serialised as decimal strings.
"""
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from taxengine.money import Money, Rate


class AgeBracket(str, Enum):
    under60 = "under60"
    sixty_79 = "60_79"
    eighty_plus = "80plus"


class RegimeName(str, Enum):
    old = "OLD"
    new = "NEW"


# ---------------------------------------------------------------------------
# IncomeTaxResult — one regime
# ---------------------------------------------------------------------------

class IncomeTaxResult(BaseModel):
    """
    Tax computed for one regime.

    Computation sequence (order determines correctness):
      1. base_tax         = progressive slab tax on income
      2. rebate           = min(base_tax, cap) if income <= rebate_threshold else 0
      3. tax_after_rebate = base_tax - rebate
      4. surcharge        = tax_after_rebate × band rate (cliff, no marginal relief)
      5. cess             = (tax_after_rebate + surcharge) × cess_rate
      6. total            = tax_after_rebate + surcharge + cess
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    regime: str                          # RegimeConfig.name, e.g. "OLD_SENIOR"
    financial_year: Optional[str] = None # None when a RegimeConfig was injected directly
    income: Money
    base_tax: Money
    rebate: Money                        # Section 87A
    tax_after_rebate: Money
    surcharge_rate: Rate
    surcharge: Money
    cess: Money
    total: Money


# ---------------------------------------------------------------------------
# RegimeComparison — OLD vs NEW
# ---------------------------------------------------------------------------

class RegimeComparison(BaseModel):
    """Lower total wins; ties go to the New Regime."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    old_regime: IncomeTaxResult
    new_regime: IncomeTaxResult
    recommended_regime: RegimeName
    savings: Money                       # abs(old.total - new.total)
    rationale: str


# ---------------------------------------------------------------------------
# Total income — heads of income, deductions, special-rate income
# ---------------------------------------------------------------------------

class IncomeHeads(BaseModel):
    """
    Income for the year by head, in INR.

    Amounts are not range-checked here: the engine raises InvalidInput naming
    the offending head. special_income is keyed by the rate table's special
    rate codes ("stcg_111a_20", "ltcg_112a_125", "lottery", ...) and holds
    taxable gains after any head-level exemption.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    salary: Decimal = Decimal("0")
    house_property: Decimal = Decimal("0")
    business_income: Decimal = Decimal("0")
    other_income: Decimal = Decimal("0")
    special_income: Dict[str, Decimal] = Field(default_factory=dict)


class Deductions(BaseModel):
    """
    Chapter VI-A claims. Each regime's rate table decides which claims it
    allows and up to what cap; a claim the regime does not allow is ignored.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    sec_80c: Decimal = Decimal("0")
    sec_80d: Decimal = Decimal("0")
    sec_80tta: Decimal = Decimal("0")
    other_old_regime: Decimal = Decimal("0")
    other_new_regime: Decimal = Decimal("0")


class TotalIncomeTaxResult(BaseModel):
    """
    Tax on total income for one regime.

    Computation sequence:
      1. gross_total_income   = normal_income (salary + house property + business
                                + other) + special_income
      2. total_deductions     = standard deduction (salary > 0, limited to salary)
                                + Chapter VI-A claims within the regime's caps
      3. taxable_normal_income = max(0, normal_income - total_deductions)
      4. total_income         = taxable_normal_income + special_income
      5. slab_tax             = progressive slab tax on taxable_normal_income
      6. special_tax          = Σ special income × its flat rate
      7. rebate               = min(slab_tax, cap) if total_income <= rebate_threshold
                                (87A never reduces special-rate tax)
      8. tax_after_rebate     = slab_tax - rebate + special_tax
      9. surcharge            = tax_after_rebate × band rate on total_income (cliff)
     10. cess                 = (tax_after_rebate + surcharge) × cess_rate
     11. total                = tax_after_rebate + surcharge + cess
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    regime: str
    financial_year: Optional[str] = None
    normal_income: Money
    special_income: Money
    gross_total_income: Money
    standard_deduction: Money
    chapter_via_deductions: Money
    total_deductions: Money
    taxable_normal_income: Money
    total_income: Money
    slab_tax: Money
    special_tax: Money
    special_tax_by_code: Dict[str, Money] = Field(default_factory=dict)
    rebate: Money
    tax_after_rebate: Money
    surcharge_rate: Rate
    surcharge: Money
    cess: Money
    total: Money


class TotalIncomeComparison(BaseModel):
    """Same heads and claims under both regimes. Lower total wins; ties go to NEW."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    old_regime: TotalIncomeTaxResult
    new_regime: TotalIncomeTaxResult
    recommended_regime: RegimeName
    savings: Money
    rationale: str


# ---------------------------------------------------------------------------
# HTTP request bodies
# ---------------------------------------------------------------------------

class IncomeTaxRequest(BaseModel):
    """
    POST /api/income-tax

    income is NOT range-checked here: the engine raises InvalidInput (422) with
    the offending field, same as a direct Python caller would see.
    """
    model_config = ConfigDict(extra="forbid")

    income: Decimal = Field(..., description="Taxable income for the year in INR.")
    regime: RegimeName
    age_bracket: AgeBracket = AgeBracket.under60
    financial_year: Optional[str] = Field(
        default=None, description="e.g. 'FY2025-26'. Defaults to the configured year."
    )


class RegimeComparisonRequest(BaseModel):
    """POST /api/income-tax/compare — taxable incomes may differ per regime (deductions)."""
    model_config = ConfigDict(extra="forbid")

    old_regime_income: Decimal
    new_regime_income: Optional[Decimal] = Field(
        default=None, description="Defaults to old_regime_income."
    )
    age_bracket: AgeBracket = AgeBracket.under60
    financial_year: Optional[str] = None


class TotalIncomeTaxRequest(BaseModel):
    """POST /api/income-tax/total"""
    model_config = ConfigDict(extra="forbid")

    income: IncomeHeads
    deductions: Deductions = Field(default_factory=Deductions)
    regime: RegimeName
    age_bracket: AgeBracket = AgeBracket.under60
    financial_year: Optional[str] = None


class TotalIncomeComparisonRequest(BaseModel):
    """POST /api/income-tax/total/compare"""
    model_config = ConfigDict(extra="forbid")

    income: IncomeHeads
    deductions: Deductions = Field(default_factory=Deductions)
    age_bracket: AgeBracket = AgeBracket.under60
    financial_year: Optional[str] = None


__all__ = [
    "AgeBracket",
    "RegimeName",
    "IncomeTaxResult",
    "RegimeComparison",
    "IncomeHeads",
    "Deductions",
    "TotalIncomeTaxResult",
    "TotalIncomeComparison",
    "IncomeTaxRequest",
    "RegimeComparisonRequest",
    "TotalIncomeTaxRequest",
    "TotalIncomeComparisonRequest",
]
