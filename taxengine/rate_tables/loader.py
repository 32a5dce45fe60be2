"""
loader.py — load, validate and cache versioned rate-table artifacts.

One JSON file per financial year: <settings.rate_table_path>/<financial_year>.json

  load_rate_table(path)           parse + validate one artifact (no caching)
  get_rate_table(financial_year)  cached lookup; default year from settings
  available_financial_years()     artifacts present in the table directory
  preload_rate_tables()           validate every artifact — called at startup
  reload_rate_tables()            drop the cache; next lookup builds NEW objects

Tables are frozen models. Reload never mutates a table another call may be
holding: it discards the cached reference and the next lookup builds a fresh
one.
"""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from taxengine.config import settings
from taxengine.errors import ConfigurationError, NotFound
from taxengine.rate_tables.schemas import RateTable

logger = logging.getLogger(__name__)

_ARTIFACT_SUFFIX = ".json"
_FINANCIAL_YEAR_PATTERN = re.compile(r"FY[0-9]{4}-[0-9]{2}")


def load_rate_table(path: Path) -> RateTable:
    """
    Parse and validate a single rate-table artifact.

    Raises:
        ConfigurationError: unreadable file, malformed JSON, or any structural
            invariant violation (gaps, unsorted brackets, no_pan_rate < base_rate...).
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"cannot read rate table: {exc}", source=str(path)) from exc

    try:
        table = RateTable.model_validate_json(raw)
    except ValidationError as exc:
        raise ConfigurationError(str(exc), source=path.name) from exc
    except ConfigurationError as exc:
        raise ConfigurationError(str(exc), source=path.name) from exc

    expected = path.stem
    if table.financial_year != expected:
        raise ConfigurationError(
            f"financial_year '{table.financial_year}' does not match file name '{expected}'",
            source=path.name,
        )

    logger.info(
        "Rate table loaded financial_year=%s regimes=%d sections=%d",
        table.financial_year,
        len(table.regimes),
        len(table.tds_sections),
    )
    return table


def available_financial_years(directory: Optional[Path] = None) -> List[str]:
    """Financial years with an artifact in the table directory. Other files are ignored."""
    directory = directory or settings.rate_table_path
    return sorted(
        p.stem for p in directory.glob(f"*{_ARTIFACT_SUFFIX}")
        if _FINANCIAL_YEAR_PATTERN.fullmatch(p.stem)
    )


@lru_cache(maxsize=None)
def _cached_table(directory: Path, financial_year: str) -> RateTable:
    if financial_year not in available_financial_years(directory):
        raise NotFound("financial year", financial_year)
    table = load_rate_table(directory / f"{financial_year}{_ARTIFACT_SUFFIX}")
    if table.financial_year != financial_year:
        raise ConfigurationError(
            f"requested '{financial_year}' but artifact declares '{table.financial_year}'",
            source=f"{financial_year}{_ARTIFACT_SUFFIX}",
        )
    return table


def get_rate_table(financial_year: Optional[str] = None) -> RateTable:
    """
    Return the (cached, immutable) table for financial_year, default from settings.

    Only a plain label such as "FY2025-26" naming an artifact inside the table
    directory is accepted; anything else (paths, aliases) raises NotFound
    without touching the filesystem.
    """
    financial_year = financial_year or settings.default_financial_year
    if not isinstance(financial_year, str) or not _FINANCIAL_YEAR_PATTERN.fullmatch(financial_year):
        raise NotFound("financial year", str(financial_year))
    return _cached_table(settings.rate_table_path, financial_year)


def preload_rate_tables() -> List[str]:
    """
    Load every artifact in the table directory.

    Raises ConfigurationError on the first invalid table, so the application
    refuses to start rather than serving a partially valid set.
    """
    years = available_financial_years()
    if settings.default_financial_year not in years:
        raise ConfigurationError(
            f"default financial year '{settings.default_financial_year}' has no rate table "
            f"in {settings.rate_table_path}"
        )
    for year in years:
        get_rate_table(year)
    return years


def reload_rate_tables() -> None:
    _cached_table.cache_clear()
    logger.info("Rate table cache cleared")
