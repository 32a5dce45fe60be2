"""
errors.py — taxengine error taxonomy.

  InvalidInput        caller passed a negative / non-finite number where the
                      contract requires a finite value >= 0          → HTTP 422
  NotFound            unknown section code, regime name or financial year → 404
  ConfigurationError  malformed rate table, raised at load time only  → 500

InvalidInput and NotFound are caller errors: never retried, surfaced with the
field / key that caused them. ConfigurationError is fatal: a table that fails
validation is never served.

ConfigurationError is NOT a ValueError: pydantic only wraps ValueError /
AssertionError raised inside validators, so a model validator raising it
propagates unchanged out of model_validate().
"""
from __future__ import annotations

from typing import Any, Optional


class TaxEngineError(Exception):
    """Base class for every error raised by taxengine."""


class InvalidInput(TaxEngineError, ValueError):
    """A numeric input violates its contract (negative, NaN, infinite, wrong type)."""

    def __init__(self, field: str, value: Any, issue: Optional[str] = None) -> None:
        self.field = field
        self.value = value
        self.issue = issue or "must be a finite number >= 0"
        super().__init__(f"{field}={value!r}: {self.issue}")


class NotFound(TaxEngineError, LookupError):
    """Lookup of a section code, regime name or financial year failed."""

    def __init__(self, kind: str, key: str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"Unknown {kind} '{key}'")


class ConfigurationError(TaxEngineError):
    """A rate table violates a structural invariant."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)


__all__ = ["TaxEngineError", "InvalidInput", "NotFound", "ConfigurationError"]
