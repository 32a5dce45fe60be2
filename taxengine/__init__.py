"""
taxengine — Indian tax computation engine.

Pure calculators over versioned rate tables:
  income tax (Old / New regime, from taxable income or from heads of income),
  TDS / TCS by section, HRA exemption.
"""
from taxengine.errors import ConfigurationError, InvalidInput, NotFound, TaxEngineError
from taxengine.rate_tables import (
    RateTable,
    RegimeConfig,
    Residency,
    SlabBracket,
    SpecialRate,
    SurchargeBand,
    TaxCategory,
    TdsSection,
    available_financial_years,
    get_rate_table,
    load_rate_table,
    reload_rate_tables,
)
from taxengine.calculators.income_tax.schemas import (
    AgeBracket,
    Deductions,
    IncomeHeads,
    IncomeTaxResult,
    RegimeComparison,
    RegimeName,
    TotalIncomeComparison,
    TotalIncomeTaxResult,
)
from taxengine.calculators.income_tax.slab_evaluator import compute_slab_tax
from taxengine.calculators.income_tax.regime_resolver import compare_regimes, compute_income_tax
from taxengine.calculators.income_tax.total_income import (
    compare_total_income_regimes,
    compute_total_income_tax,
)
from taxengine.calculators.tds.schemas import TdsResult
from taxengine.calculators.tds.section_resolver import list_sections, resolve_tds
from taxengine.calculators.hra.schemas import (
    MONTHS,
    HraAnnualSummary,
    HraMonthInput,
    HraMonthResult,
    HraSchedule,
    MonthCode,
)
from taxengine.calculators.hra.exemption import (
    calculate_annual_summary,
    calculate_hra_schedule,
    calculate_monthly_exemption,
)

__all__ = [
    # errors
    "TaxEngineError",
    "InvalidInput",
    "NotFound",
    "ConfigurationError",
    # rate tables
    "RateTable",
    "RegimeConfig",
    "Residency",
    "SlabBracket",
    "SpecialRate",
    "SurchargeBand",
    "TaxCategory",
    "TdsSection",
    "available_financial_years",
    "get_rate_table",
    "load_rate_table",
    "reload_rate_tables",
    # income tax
    "AgeBracket",
    "IncomeTaxResult",
    "RegimeComparison",
    "RegimeName",
    "compute_slab_tax",
    "compute_income_tax",
    "compare_regimes",
    "IncomeHeads",
    "Deductions",
    "TotalIncomeTaxResult",
    "TotalIncomeComparison",
    "compute_total_income_tax",
    "compare_total_income_regimes",
    # TDS / TCS
    "TdsResult",
    "list_sections",
    "resolve_tds",
    # HRA
    "MONTHS",
    "MonthCode",
    "HraMonthInput",
    "HraMonthResult",
    "HraAnnualSummary",
    "HraSchedule",
    "calculate_monthly_exemption",
    "calculate_annual_summary",
    "calculate_hra_schedule",
]
