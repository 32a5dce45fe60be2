"""
Total income — heads of income, deductions and special-rate income.

Builds on the regime resolver: the same regime, rebate, surcharge and cess
rules, applied to total income assembled from its parts.

  - Normal income (salary, house property, business, other sources) is
    reduced by the regime's standard deduction and the Chapter VI-A claims it
    allows, then taxed on the slabs.
  - Special-rate income (capital gains, lottery) is taxed at the flat rate
    the rate table gives its code and never enters the slabs.
  - The 87A rebate is tested against total income but only ever reduces the
    slab tax.
  - The surcharge band is chosen on total income.

With only other_income supplied the result matches compute_income_tax for
the same amount.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Optional, Union

from taxengine.calculators.income_tax.regime_resolver import (
    recommend_regime,
    resolve_regime,
    surcharge_rate_for,
)
from taxengine.calculators.income_tax.schemas import (
    AgeBracket,
    Deductions,
    IncomeHeads,
    RegimeName,
    TotalIncomeComparison,
    TotalIncomeTaxResult,
)
from taxengine.calculators.income_tax.slab_evaluator import compute_slab_tax
from taxengine.money import ZERO, non_negative, to_paise
from taxengine.rate_tables.loader import get_rate_table
from taxengine.rate_tables.schemas import DEDUCTION_CODES, RegimeConfig

logger = logging.getLogger(__name__)

_NORMAL_HEADS = ("salary", "house_property", "business_income", "other_income")


def _income_heads(income: Union[IncomeHeads, dict]) -> IncomeHeads:
    if isinstance(income, IncomeHeads):
        return income
    return IncomeHeads.model_validate(income)


def _deductions(deductions: Union[Deductions, dict, None]) -> Deductions:
    if deductions is None:
        return Deductions()
    if isinstance(deductions, Deductions):
        return deductions
    return Deductions.model_validate(deductions)


def compute_total_income_tax(
    income: Union[IncomeHeads, dict],
    regime: Union[RegimeConfig, RegimeName, str],
    *,
    deductions: Union[Deductions, dict, None] = None,
    age_bracket: Union[AgeBracket, str] = AgeBracket.under60,
    financial_year: Optional[str] = None,
) -> TotalIncomeTaxResult:
    """
    Income tax for one regime, starting from heads of income.

    Raises:
        InvalidInput: a head, special income amount or deduction is negative
            or non-finite; unknown age_bracket.
        NotFound: unknown regime, special rate code or financial year.
    """
    heads = _income_heads(income)
    claims = _deductions(deductions)
    config = resolve_regime(regime, age_bracket=age_bracket, financial_year=financial_year)
    table = get_rate_table(financial_year)

    # Step 1: Gross total income
    amounts = {head: non_negative(getattr(heads, head), head) for head in _NORMAL_HEADS}
    normal_income = sum(amounts.values(), ZERO)

    special_tax_by_code: Dict[str, Decimal] = {}
    special_income = ZERO
    for code, value in heads.special_income.items():
        amount = non_negative(value, f"special_income.{code}")
        special_income += amount
        special_tax_by_code[code] = amount * table.special_rate(code).rate
    gross_total_income = normal_income + special_income

    # Step 2: Deductions (standard + Chapter VI-A within the regime's caps)
    salary = amounts["salary"]
    standard_deduction = min(salary, config.standard_deduction) if salary > ZERO else ZERO
    chapter_via = sum(
        (
            config.deduction_allowed(code, non_negative(getattr(claims, code), code))
            for code in DEDUCTION_CODES
        ),
        ZERO,
    )
    total_deductions = standard_deduction + chapter_via

    # Step 3: Taxable normal income and total income
    taxable_normal_income = max(ZERO, normal_income - total_deductions)
    total_income = taxable_normal_income + special_income

    # Step 4: Slab tax and 87A rebate (slab tax only)
    slab_tax = compute_slab_tax(taxable_normal_income, config.brackets)
    if total_income <= config.rebate_threshold:
        rebate = min(slab_tax, config.rebate_cap_amount)
    else:
        rebate = ZERO
    special_tax = sum(special_tax_by_code.values(), ZERO)
    tax_after_rebate = slab_tax - rebate + special_tax

    # Step 5: Surcharge (band on total income) and cess
    surcharge_rate = surcharge_rate_for(total_income, config.surcharge_bands)
    surcharge = tax_after_rebate * surcharge_rate
    cess = (tax_after_rebate + surcharge) * config.cess_rate

    special_tax_by_code_r = {code: to_paise(tax) for code, tax in special_tax_by_code.items()}
    slab_tax_r = to_paise(slab_tax)
    rebate_r = to_paise(rebate)
    special_tax_r = sum(special_tax_by_code_r.values(), ZERO)
    tax_after_rebate_r = slab_tax_r - rebate_r + special_tax_r
    surcharge_r = to_paise(surcharge)
    cess_r = to_paise(cess)

    result = TotalIncomeTaxResult(
        regime=config.name,
        financial_year=None if isinstance(regime, RegimeConfig) else table.financial_year,
        normal_income=normal_income,
        special_income=special_income,
        gross_total_income=gross_total_income,
        standard_deduction=standard_deduction,
        chapter_via_deductions=chapter_via,
        total_deductions=total_deductions,
        taxable_normal_income=taxable_normal_income,
        total_income=total_income,
        slab_tax=slab_tax_r,
        special_tax=special_tax_r,
        special_tax_by_code=special_tax_by_code_r,
        rebate=rebate_r,
        tax_after_rebate=tax_after_rebate_r,
        surcharge_rate=surcharge_rate,
        surcharge=surcharge_r,
        cess=cess_r,
        total=tax_after_rebate_r + surcharge_r + cess_r,
    )
    logger.debug(
        "Total income tax computed regime=%s financial_year=%s total_income=%s",
        result.regime,
        result.financial_year,
        result.total_income,
    )
    return result


def compare_total_income_regimes(
    income: Union[IncomeHeads, dict],
    *,
    deductions: Union[Deductions, dict, None] = None,
    age_bracket: Union[AgeBracket, str] = AgeBracket.under60,
    financial_year: Optional[str] = None,
) -> TotalIncomeComparison:
    """Same heads and claims under both regimes; each regime applies its own deductions."""
    old = compute_total_income_tax(
        income, RegimeName.old, deductions=deductions,
        age_bracket=age_bracket, financial_year=financial_year,
    )
    new = compute_total_income_tax(
        income, RegimeName.new, deductions=deductions,
        age_bracket=age_bracket, financial_year=financial_year,
    )
    recommended, savings, rationale = recommend_regime(old.total, new.total)
    return TotalIncomeComparison(
        old_regime=old,
        new_regime=new,
        recommended_regime=recommended,
        savings=savings,
        rationale=rationale,
    )
