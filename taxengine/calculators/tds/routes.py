"""
TDS / TCS HTTP routes — GET  /api/tds/sections
                        POST /api/tds
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from taxengine.calculators.tds.schemas import TdsRequest
from taxengine.calculators.tds.section_resolver import list_sections, resolve_tds
from taxengine.rate_tables.loader import get_rate_table

router = APIRouter(prefix="/api", tags=["tds"])
logger = logging.getLogger(__name__)


@router.get("/tds/sections")
async def get_tds_sections(
    category: Optional[str] = None,
    residency: Optional[str] = None,
    financial_year: Optional[str] = None,
) -> JSONResponse:
    """Section catalogue for a section picker, in table order."""
    sections = list_sections(
        category=category, residency=residency, financial_year=financial_year
    )
    table = get_rate_table(financial_year)
    return JSONResponse(
        status_code=200,
        content={
            "financial_year": table.financial_year,
            "sections": [s.model_dump(mode="json") for s in sections],
        },
    )


@router.post("/tds")
async def calculate_tds(body: TdsRequest) -> JSONResponse:
    result = resolve_tds(
        body.payment_amount,
        body.section_code,
        body.pan_available,
        financial_year=body.financial_year,
    )
    logger.info(
        "TDS calculated section=%s applicable=%s", result.section_code, result.applicable
    )
    return JSONResponse(status_code=200, content=result.model_dump(mode="json"))
