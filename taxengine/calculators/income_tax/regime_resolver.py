"""
Regime resolver — income tax under the Old and New regimes.
Pure Python, deterministic, exact Decimal. Same input → same output.

All rates, slabs and thresholds come from a RegimeConfig: either injected by
the caller or looked up by name in the versioned rate table. Nothing here is
a module-level tax constant, so several financial years coexist.

Surcharge is a CLIFF. Income one rupee above a band threshold pays the band
rate on the whole tax; there is no marginal-relief smoothing.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Sequence, Tuple, Union

from taxengine.calculators.income_tax.schemas import (
    AgeBracket,
    IncomeTaxResult,
    RegimeComparison,
    RegimeName,
)
from taxengine.calculators.income_tax.slab_evaluator import compute_slab_tax
from taxengine.errors import InvalidInput
from taxengine.money import ZERO, Number, non_negative, to_paise
from taxengine.rate_tables.loader import get_rate_table
from taxengine.rate_tables.schemas import RegimeConfig, SurchargeBand

logger = logging.getLogger(__name__)

# Old regime basic exemption depends on age; the New regime does not.
_OLD_REGIME_BY_AGE = {
    AgeBracket.under60: "OLD",
    AgeBracket.sixty_79: "OLD_SENIOR",
    AgeBracket.eighty_plus: "OLD_SUPER_SENIOR",
}


# ===========================================================================
# INTERNAL HELPERS
# ===========================================================================

def _age_bracket(value: Union[AgeBracket, str]) -> AgeBracket:
    try:
        return AgeBracket(value)
    except ValueError:
        raise InvalidInput(
            "age_bracket", value, f"must be one of {[a.value for a in AgeBracket]}"
        ) from None


def surcharge_rate_for(income: Decimal, bands: Sequence[SurchargeBand]) -> Decimal:
    """Rate of the highest band whose income_above is strictly below income."""
    rate = ZERO
    for band in bands:
        if income > band.income_above:
            rate = band.rate
    return rate


def recommend_regime(old_total: Decimal, new_total: Decimal) -> Tuple[RegimeName, Decimal, str]:
    """Lower total wins; ties go to the New Regime. Returns (regime, savings, rationale)."""
    if old_total < new_total:
        savings = new_total - old_total
        return RegimeName.old, savings, (
            f"Old Regime saves ₹{savings:,.2f} over the New Regime. "
            f"Old Regime tax: ₹{old_total:,.2f} vs New Regime tax: ₹{new_total:,.2f}."
        )
    if new_total < old_total:
        savings = old_total - new_total
        return RegimeName.new, savings, (
            f"New Regime saves ₹{savings:,.2f} over the Old Regime. "
            f"New Regime tax: ₹{new_total:,.2f} vs Old Regime tax: ₹{old_total:,.2f}."
        )
    # Tie → New Regime
    return RegimeName.new, ZERO, (
        f"Both regimes result in the same tax (₹{old_total:,.2f}). "
        "New Regime recommended as the simpler option."
    )


def resolve_regime(
    regime: Union[RegimeConfig, RegimeName, str],
    *,
    age_bracket: Union[AgeBracket, str] = AgeBracket.under60,
    financial_year: Optional[str] = None,
) -> RegimeConfig:
    """
    Map a regime reference onto a RegimeConfig.

    "OLD" is refined by age_bracket (OLD / OLD_SENIOR / OLD_SUPER_SENIOR).
    Any other name is looked up as-is, so table-specific names also work.

    Raises:
        NotFound: the name is not in the financial year's table, or the
            financial year has no table.
    """
    if isinstance(regime, RegimeConfig):
        return regime

    name = regime.value if isinstance(regime, RegimeName) else str(regime).upper()
    if name == RegimeName.old.value:
        name = _OLD_REGIME_BY_AGE[_age_bracket(age_bracket)]
    return get_rate_table(financial_year).regime(name)


# ===========================================================================
# PUBLIC API
# ===========================================================================

def compute_income_tax(
    income: Number,
    regime: Union[RegimeConfig, RegimeName, str],
    *,
    age_bracket: Union[AgeBracket, str] = AgeBracket.under60,
    financial_year: Optional[str] = None,
) -> IncomeTaxResult:
    """
    Income tax for one regime.

    Steps: slab tax → 87A rebate (inclusive threshold) → surcharge (cliff)
    → cess on (tax + surcharge). Components are rounded to paise once, and
    total is the sum of the rounded components.

    Raises:
        InvalidInput: income negative / non-finite, or unknown age_bracket.
        NotFound: unknown regime name or financial year.
    """
    amount = non_negative(income, "income")
    config = resolve_regime(regime, age_bracket=age_bracket, financial_year=financial_year)
    if isinstance(regime, RegimeConfig):
        table_year = None
    else:
        table_year = get_rate_table(financial_year).financial_year

    # Step 1: Slab tax
    base_tax = compute_slab_tax(amount, config.brackets)

    # Step 2: 87A rebate
    if amount <= config.rebate_threshold:
        rebate = min(base_tax, config.rebate_cap_amount)
    else:
        rebate = ZERO
    tax_after_rebate = base_tax - rebate

    # Step 3: Surcharge (on post-rebate tax)
    surcharge_rate = surcharge_rate_for(amount, config.surcharge_bands)
    surcharge = tax_after_rebate * surcharge_rate

    # Step 4: Cess (on tax + surcharge)
    cess = (tax_after_rebate + surcharge) * config.cess_rate

    base_tax_r = to_paise(base_tax)
    rebate_r = to_paise(rebate)
    tax_after_rebate_r = base_tax_r - rebate_r
    surcharge_r = to_paise(surcharge)
    cess_r = to_paise(cess)

    result = IncomeTaxResult(
        regime=config.name,
        financial_year=table_year,
        income=amount,
        base_tax=base_tax_r,
        rebate=rebate_r,
        tax_after_rebate=tax_after_rebate_r,
        surcharge_rate=surcharge_rate,
        surcharge=surcharge_r,
        cess=cess_r,
        total=tax_after_rebate_r + surcharge_r + cess_r,
    )
    logger.debug(
        "Income tax computed regime=%s financial_year=%s", result.regime, result.financial_year
    )
    return result


def compare_regimes(
    old_regime_income: Number,
    new_regime_income: Optional[Number] = None,
    *,
    age_bracket: Union[AgeBracket, str] = AgeBracket.under60,
    financial_year: Optional[str] = None,
) -> RegimeComparison:
    """
    Compute both regimes and recommend the lower total.

    Taxable income usually differs between regimes because the Old regime
    allows more deductions; new_regime_income defaults to old_regime_income.
    Ties go to the New Regime.
    """
    if new_regime_income is None:
        new_regime_income = old_regime_income

    old = compute_income_tax(
        old_regime_income, RegimeName.old,
        age_bracket=age_bracket, financial_year=financial_year,
    )
    new = compute_income_tax(
        new_regime_income, RegimeName.new,
        age_bracket=age_bracket, financial_year=financial_year,
    )

    recommended, savings, rationale = recommend_regime(old.total, new.total)

    logger.debug(
        "Regimes compared recommended=%s financial_year=%s",
        recommended.value,
        old.financial_year,
    )
    return RegimeComparison(
        old_regime=old,
        new_regime=new,
        recommended_regime=recommended,
        savings=savings,
        rationale=rationale,
    )
