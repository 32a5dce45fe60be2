"""
Regime resolver test suite — FY2025-26 (AY2026-27) and FY2024-25.
All expected values hand-computed; exact Decimal equality, no tolerance.

Groups:
  1. Parametrised income tax cases (NEW / OLD / senior slabs)
  2. 87A rebate cliff
  3. Surcharge cliff and New regime cap
  4. Monotonicity and non-negativity sweep
  5. Injected RegimeConfig and error cases
  6. compare_regimes
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

import pytest

from taxengine.calculators.income_tax.regime_resolver import (
    compare_regimes,
    compute_income_tax,
    resolve_regime,
)
from taxengine.calculators.income_tax.schemas import AgeBracket, RegimeName
from taxengine.errors import InvalidInput, NotFound
from taxengine.rate_tables.schemas import RegimeConfig, SlabBracket, SurchargeBand

D = Decimal


# ===========================================================================
# TEST GROUP 1: Parametrised income tax cases
# ===========================================================================

@dataclass
class TaxCase:
    """Single parametrised case for compute_income_tax()."""
    description: str
    income: int
    regime: str
    expected_base_tax: Decimal
    expected_total: Decimal
    age_bracket: str = "under60"
    financial_year: str = "FY2025-26"


TAX_CASES: list[TaxCase] = [
    # --- New regime, FY2025-26 ---
    TaxCase("new_zero_income", 0, "NEW", D("0"), D("0")),
    TaxCase("new_10L_base_40k_rebated", 1_000_000, "NEW", D("40000"), D("0")),
    TaxCase("new_12L_exactly_rebated", 1_200_000, "NEW", D("60000"), D("0")),
    TaxCase("new_13L", 1_300_000, "NEW", D("75000"), D("78000")),
    TaxCase("new_24L", 2_400_000, "NEW", D("300000"), D("312000")),
    TaxCase("new_30L", 3_000_000, "NEW", D("480000"), D("499200")),
    # --- Old regime, below 60 ---
    TaxCase("old_5L_rebated", 500_000, "OLD", D("12500"), D("0")),
    TaxCase("old_10L", 1_000_000, "OLD", D("112500"), D("117000")),
    TaxCase("old_50L_no_surcharge", 5_000_000, "OLD", D("1312500"), D("1365000")),
    # --- Old regime, senior (3L exemption) ---
    TaxCase("old_senior_10L", 1_000_000, "OLD", D("110000"), D("114400"), age_bracket="60_79"),
    TaxCase("old_senior_3L", 300_000, "OLD", D("0"), D("0"), age_bracket="60_79"),
    # --- Old regime, super senior (5L exemption) ---
    TaxCase("old_super_senior_10L", 1_000_000, "OLD", D("100000"), D("104000"), age_bracket="80plus"),
    TaxCase("old_super_senior_5L", 500_000, "OLD", D("0"), D("0"), age_bracket="80plus"),
    # --- New regime, FY2024-25 (3L/7L/10L/12L/15L) ---
    TaxCase("fy2425_new_7L_rebated", 700_000, "NEW", D("20000"), D("0"), financial_year="FY2024-25"),
    TaxCase("fy2425_new_10L", 1_000_000, "NEW", D("50000"), D("52000"), financial_year="FY2024-25"),
]


@pytest.mark.parametrize("case", TAX_CASES, ids=[c.description for c in TAX_CASES])
def test_income_tax_cases(case: TaxCase) -> None:
    result = compute_income_tax(
        case.income,
        case.regime,
        age_bracket=case.age_bracket,
        financial_year=case.financial_year,
    )
    assert result.base_tax == case.expected_base_tax, case.description
    assert result.total == case.expected_total, case.description
    assert result.financial_year == case.financial_year


def test_total_is_sum_of_rounded_components() -> None:
    result = compute_income_tax(1_733_333, "NEW")
    assert result.total == result.tax_after_rebate + result.surcharge + result.cess
    assert result.tax_after_rebate == result.base_tax - result.rebate
    for value in (result.base_tax, result.rebate, result.surcharge, result.cess, result.total):
        assert value == value.quantize(D("0.01"))


def test_regime_accepts_enum_and_lower_case_name() -> None:
    by_enum = compute_income_tax(1_500_000, RegimeName.new)
    by_name = compute_income_tax(1_500_000, "new")
    assert by_enum == by_name
    assert by_enum.regime == "NEW"


@pytest.mark.parametrize(
    "age_bracket, expected_name",
    [
        (AgeBracket.under60, "OLD"),
        ("60_79", "OLD_SENIOR"),
        ("80plus", "OLD_SUPER_SENIOR"),
    ],
)
def test_old_regime_resolved_by_age(age_bracket, expected_name: str) -> None:
    assert resolve_regime("OLD", age_bracket=age_bracket).name == expected_name


def test_new_regime_ignores_age() -> None:
    young = compute_income_tax(1_800_000, "NEW", age_bracket="under60")
    old = compute_income_tax(1_800_000, "NEW", age_bracket="80plus")
    assert young.total == old.total


# ===========================================================================
# TEST GROUP 2: 87A rebate cliff
# ===========================================================================

def test_new_regime_rebate_cliff_at_12_lakh() -> None:
    at = compute_income_tax(1_200_000, "NEW")
    above = compute_income_tax(1_200_001, "NEW")

    assert at.rebate == D("60000")
    assert at.total == D("0")

    assert above.rebate == D("0")
    assert above.base_tax == D("60000.15")
    assert above.cess == D("2400.01")
    assert above.total == D("62400.16")


def test_old_regime_rebate_cliff_at_5_lakh() -> None:
    at = compute_income_tax(500_000, "OLD")
    above = compute_income_tax(500_001, "OLD")

    assert at.total == D("0")
    assert above.base_tax == D("12500.20")
    assert above.cess == D("500.01")
    assert above.total == D("13000.21")


# ===========================================================================
# TEST GROUP 3: Surcharge
# ===========================================================================

def test_no_surcharge_at_exactly_50_lakh() -> None:
    result = compute_income_tax(5_000_000, "OLD")
    assert result.surcharge_rate == D("0")
    assert result.surcharge == D("0")


def test_surcharge_cliff_one_rupee_above_50_lakh() -> None:
    """No marginal relief: one extra rupee adds 10% of the whole tax."""
    result = compute_income_tax(5_000_001, "OLD")
    assert result.base_tax == D("1312500.30")
    assert result.surcharge_rate == D("0.10")
    assert result.surcharge == D("131250.03")
    assert result.cess == D("57750.01")
    assert result.total == D("1501500.34")
    assert result.total - compute_income_tax(5_000_000, "OLD").total > D("100000")


@pytest.mark.parametrize(
    "income, expected_rate",
    [
        (10_000_000, D("0.10")),
        (10_000_001, D("0.15")),
        (20_000_001, D("0.25")),
        (50_000_001, D("0.37")),
    ],
)
def test_old_regime_surcharge_bands(income: int, expected_rate: Decimal) -> None:
    assert compute_income_tax(income, "OLD").surcharge_rate == expected_rate


def test_new_regime_surcharge_capped_at_25_percent() -> None:
    result = compute_income_tax(60_000_000, "NEW")
    assert result.surcharge_rate == D("0.25")


# ===========================================================================
# TEST GROUP 4: Monotonicity sweep
# ===========================================================================

SWEEP = [0, 250_000, 400_000, 500_000, 700_000, 1_000_000, 1_300_000, 2_500_000,
         6_000_000, 12_000_000, 25_000_000, 60_000_000]


@pytest.mark.parametrize("regime, age_bracket", [
    ("NEW", "under60"),
    ("OLD", "under60"),
    ("OLD", "60_79"),
    ("OLD", "80plus"),
])
def test_total_non_negative_and_non_decreasing(regime: str, age_bracket: str) -> None:
    totals = [compute_income_tax(i, regime, age_bracket=age_bracket).total for i in SWEEP]
    assert all(t >= 0 for t in totals)
    assert totals == sorted(totals)


# ===========================================================================
# TEST GROUP 5: Injected configuration and errors
# ===========================================================================

def _flat_config() -> RegimeConfig:
    return RegimeConfig(
        name="FLAT",
        brackets=(
            SlabBracket(upper_bound=D("100000"), rate=D("0")),
            SlabBracket(upper_bound=None, rate=D("0.10")),
        ),
        cess_rate=D("0.02"),
        rebate_threshold=D("0"),
        rebate_cap_amount=D("0"),
        surcharge_bands=(SurchargeBand(income_above=D("1000000"), rate=D("0.50")),),
    )


def test_injected_regime_config_is_used_as_is() -> None:
    result = compute_income_tax(1_100_000, _flat_config())
    # 10L @10% = 1,00,000 ; surcharge 50% ; cess 2% on 1,50,000
    assert result.regime == "FLAT"
    assert result.financial_year is None
    assert result.base_tax == D("100000")
    assert result.surcharge == D("50000")
    assert result.cess == D("3000")
    assert result.total == D("153000")


@pytest.mark.parametrize("bad", [-1, float("nan"), float("-inf")])
def test_invalid_income_raises(bad) -> None:
    with pytest.raises(InvalidInput):
        compute_income_tax(bad, "NEW")


def test_unknown_regime_raises_not_found() -> None:
    with pytest.raises(NotFound):
        compute_income_tax(100_000, "FLAT_TAX")


def test_unknown_financial_year_raises_not_found() -> None:
    with pytest.raises(NotFound):
        compute_income_tax(100_000, "NEW", financial_year="FY1999-00")


def test_unknown_age_bracket_raises_invalid_input() -> None:
    with pytest.raises(InvalidInput) as exc_info:
        compute_income_tax(100_000, "OLD", age_bracket="teen")
    assert exc_info.value.field == "age_bracket"


# ===========================================================================
# TEST GROUP 6: compare_regimes
# ===========================================================================

def test_compare_prefers_lower_total() -> None:
    comparison = compare_regimes(500_000, 1_300_000)
    assert comparison.old_regime.total == D("0")
    assert comparison.new_regime.total == D("78000")
    assert comparison.recommended_regime == RegimeName.old
    assert comparison.savings == D("78000")
    assert "Old Regime saves" in comparison.rationale


def test_compare_same_income_new_wins_at_10_lakh() -> None:
    comparison = compare_regimes(1_000_000)
    assert comparison.new_regime.total == D("0")
    assert comparison.old_regime.total == D("117000")
    assert comparison.recommended_regime == RegimeName.new
    assert comparison.savings == D("117000")


def test_compare_tie_goes_to_new_regime() -> None:
    comparison = compare_regimes(400_000)
    assert comparison.old_regime.total == comparison.new_regime.total == D("0")
    assert comparison.recommended_regime == RegimeName.new
    assert comparison.savings == D("0")


def test_compare_uses_age_for_old_regime_only() -> None:
    comparison = compare_regimes(1_000_000, age_bracket="80plus")
    assert comparison.old_regime.regime == "OLD_SUPER_SENIOR"
    assert comparison.new_regime.regime == "NEW"
