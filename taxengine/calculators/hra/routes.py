"""
HRA HTTP routes — POST /api/hra/month
                  POST /api/hra/annual
"""
from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from taxengine.calculators.hra.exemption import calculate_hra_schedule, calculate_monthly_exemption
from taxengine.calculators.hra.schemas import HraMonthInput, HraScheduleRequest

router = APIRouter(prefix="/api", tags=["hra"])
logger = logging.getLogger(__name__)


@router.post("/hra/month")
async def calculate_hra_month(body: HraMonthInput) -> JSONResponse:
    result = calculate_monthly_exemption(body)
    return JSONResponse(status_code=200, content=result.model_dump(mode="json"))


@router.post("/hra/annual")
async def calculate_hra_annual(body: HraScheduleRequest) -> JSONResponse:
    """Rows in input order plus the annual summary."""
    schedule = calculate_hra_schedule(body.months)
    logger.info("HRA schedule calculated months=%d", schedule.summary.months)
    return JSONResponse(status_code=200, content=schedule.model_dump(mode="json"))
