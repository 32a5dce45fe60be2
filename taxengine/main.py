"""
main.py — taxengine FastAPI application entry point.

Start with: uvicorn taxengine.main:app --reload --port 8000
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taxengine.config import settings
from taxengine.errors import ConfigurationError, InvalidInput, NotFound
from taxengine.rate_tables.loader import available_financial_years, preload_rate_tables

# ---------------------------------------------------------------------------
# Logging — configured before anything else
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan — startup & shutdown hooks
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup:
      1. Load and validate every rate table. A malformed table raises
         ConfigurationError here and the application does not start.
    """
    years = preload_rate_tables()
    logger.info(
        "Rate tables ready financial_years=%s default=%s",
        ",".join(years),
        settings.default_financial_year,
    )

    logger.info("taxengine v%s starting up", settings.app_version)
    yield
    logger.info("taxengine shutting down")


# ---------------------------------------------------------------------------
# FastAPI application instance
# ---------------------------------------------------------------------------
app = FastAPI(
    title="taxengine API",
    version=settings.app_version,
    description=(
        "Indian tax computation engine: income tax under the Old and New regimes, "
        "section-wise TDS/TCS and HRA exemption. Outputs are illustrative, not filing-grade."
    ),
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# ---------------------------------------------------------------------------
# CORS middleware — restricted to frontend origins from settings
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error response helper
# ---------------------------------------------------------------------------
def _make_error_response(
    code: str,
    message: str,
    details: list[dict[str, Any]] | None = None,
    status_code: int = 500,
) -> JSONResponse:
    """Build a standard {error: {code, message, details}} response."""
    body = {
        "error": {
            "code": code,
            "message": message,
            "details": details or [],
        }
    }
    return JSONResponse(status_code=status_code, content=body)


# ---------------------------------------------------------------------------
# Global exception handlers — registered BEFORE routers
# ---------------------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """All field violations of a malformed body, in one response."""
    details = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
        details.append({"field": field or None, "issue": error["msg"]})
    return _make_error_response(
        code="VALIDATION_ERROR",
        message="Request validation failed",
        details=details,
        status_code=422,
    )


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput) -> JSONResponse:
    return _make_error_response(
        code="VALIDATION_ERROR",
        message=str(exc),
        details=[{"field": exc.field, "issue": exc.issue}],
        status_code=422,
    )


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return _make_error_response(
        code="NOT_FOUND",
        message=str(exc),
        details=[{"field": exc.kind, "issue": f"'{exc.key}' does not exist"}],
        status_code=404,
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    """A table that fails validation is never served; details stay server-side."""
    logger.error(
        "Rate table configuration error on %s %s: %s",
        request.method,
        request.url.path,
        exc,
    )
    return _make_error_response(
        code="CONFIGURATION_ERROR",
        message="Rate table configuration is invalid",
        details=[{"issue": str(exc)}] if settings.debug else [],
        status_code=500,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Converts HTTPException (404 route, 405 method...) to the standard format."""
    code_map = {
        400: "BAD_REQUEST",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        422: "VALIDATION_ERROR",
    }
    code = code_map.get(exc.status_code, f"HTTP_{exc.status_code}")
    return _make_error_response(
        code=code,
        message=str(exc.detail),
        status_code=exc.status_code,
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Explicit ValueError raises from model construction surface as a data issue."""
    return _make_error_response(
        code="VALIDATION_ERROR",
        message=str(exc),
        status_code=422,
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """
    Catch-all for unexpected errors.
    DEBUG=true  → includes exception type & message in details (dev only).
    DEBUG=false → generic message; full traceback logged server-side only.
    """
    logger.error(
        "Unhandled exception on %s %s",
        request.method,
        request.url.path,
        exc_info=True,
    )
    if settings.debug:
        details = [{"issue": f"{type(exc).__name__}: {exc}"}]
        message = "An unexpected error occurred (debug details included)"
    else:
        details = []
        message = "An unexpected error occurred"
    return _make_error_response(
        code="INTERNAL_ERROR",
        message=message,
        details=details,
        status_code=500,
    )


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------
@app.get("/api/health", tags=["System"])
async def health_check() -> dict:
    return {
        "status": "ok",
        "version": settings.app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/rate-tables", tags=["System"])
async def list_rate_tables() -> dict:
    """Financial years with a shipped rate table, and the default one."""
    return {
        "financial_years": available_financial_years(),
        "default_financial_year": settings.default_financial_year,
    }


# ---------------------------------------------------------------------------
# Calculator routers
# ---------------------------------------------------------------------------
from taxengine.calculators.income_tax.routes import router as income_tax_router  # noqa: E402
from taxengine.calculators.tds.routes import router as tds_router  # noqa: E402
from taxengine.calculators.hra.routes import router as hra_router  # noqa: E402

app.include_router(income_tax_router)
app.include_router(tds_router)
app.include_router(hra_router)
