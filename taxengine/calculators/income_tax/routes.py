"""
Income tax HTTP routes — POST /api/income-tax,
                          POST /api/income-tax/compare,
                          POST /api/income-tax/total,
                          POST /api/income-tax/total/compare

Thin wrappers: validate the body, call the pure engine, serialise the result.
Engine errors (InvalidInput / NotFound) are mapped to the standard error
envelope by the handlers registered in main.py.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from taxengine.calculators.income_tax.regime_resolver import compare_regimes, compute_income_tax
from taxengine.calculators.income_tax.schemas import (
    IncomeTaxRequest,
    RegimeComparisonRequest,
    TotalIncomeComparisonRequest,
    TotalIncomeTaxRequest,
)
from taxengine.calculators.income_tax.total_income import (
    compare_total_income_regimes,
    compute_total_income_tax,
)

router = APIRouter(prefix="/api", tags=["income_tax"])
logger = logging.getLogger(__name__)


@router.post("/income-tax")
async def calculate_income_tax(body: IncomeTaxRequest) -> JSONResponse:
    """Income tax for one regime (OLD refined by age_bracket)."""
    result = compute_income_tax(
        body.income,
        body.regime,
        age_bracket=body.age_bracket,
        financial_year=body.financial_year,
    )
    logger.info(
        "Income tax calculated regime=%s financial_year=%s",
        result.regime,
        result.financial_year,
    )
    return JSONResponse(status_code=200, content=result.model_dump(mode="json"))


@router.post("/income-tax/compare")
async def compare_income_tax_regimes(body: RegimeComparisonRequest) -> JSONResponse:
    """Both regimes side by side with a recommendation."""
    comparison = compare_regimes(
        body.old_regime_income,
        body.new_regime_income,
        age_bracket=body.age_bracket,
        financial_year=body.financial_year,
    )
    logger.info(
        "Regimes compared recommended=%s financial_year=%s",
        comparison.recommended_regime.value,
        comparison.old_regime.financial_year,
    )
    return JSONResponse(status_code=200, content=comparison.model_dump(mode="json"))


@router.post("/income-tax/total")
async def calculate_total_income_tax(body: TotalIncomeTaxRequest) -> JSONResponse:
    """Income tax from heads of income, deductions and special-rate income."""
    result = compute_total_income_tax(
        body.income,
        body.regime,
        deductions=body.deductions,
        age_bracket=body.age_bracket,
        financial_year=body.financial_year,
    )
    logger.info(
        "Total income tax calculated regime=%s financial_year=%s",
        result.regime,
        result.financial_year,
    )
    return JSONResponse(status_code=200, content=result.model_dump(mode="json"))


@router.post("/income-tax/total/compare")
async def compare_total_income_tax_regimes(body: TotalIncomeComparisonRequest) -> JSONResponse:
    """Both regimes from the same heads and claims, with a recommendation."""
    comparison = compare_total_income_regimes(
        body.income,
        deductions=body.deductions,
        age_bracket=body.age_bracket,
        financial_year=body.financial_year,
    )
    logger.info(
        "Total income regimes compared recommended=%s financial_year=%s",
        comparison.recommended_regime.value,
        comparison.old_regime.financial_year,
    )
    return JSONResponse(status_code=200, content=comparison.model_dump(mode="json"))
