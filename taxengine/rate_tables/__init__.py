"""
rate_tables/__init__.py — public surface of the versioned rate tables.
"""
from taxengine.rate_tables.schemas import (
    DEDUCTION_CODES,
    RateTable,
    RegimeConfig,
    Residency,
    SlabBracket,
    SpecialRate,
    SurchargeBand,
    TaxCategory,
    TdsSection,
)
from taxengine.rate_tables.loader import (
    available_financial_years,
    get_rate_table,
    load_rate_table,
    preload_rate_tables,
    reload_rate_tables,
)

__all__ = [
    "DEDUCTION_CODES",
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
    "preload_rate_tables",
    "reload_rate_tables",
]
