"""
schemas.py — rate-table data contracts (pydantic v2, frozen).

Defines:
  - SlabBracket     (upper_bound, marginal rate) — upper_bound None = unbounded
  - SurchargeBand   (income_above, rate)
  - RegimeConfig    (slabs + cess + 87A rebate + surcharge + deductions for one regime)
  - SpecialRate     (flat rate for income taxed outside the slabs)
  - TdsSection      (one TDS/TCS section: base / no-PAN rate, threshold)
  - RateTable       (every regime and section for one financial year)

Structural invariants are checked here, at construction time, and raise
ConfigurationError. A RateTable that exists is a valid RateTable; the
calculators never re-check it per call.
"""
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
    model_validator,
)

from taxengine.errors import ConfigurationError, NotFound
from taxengine.money import Money, Rate


class TaxCategory(str, Enum):
    tds = "TDS"
    tcs = "TCS"


class Residency(str, Enum):
    resident = "resident"
    non_resident = "non_resident"


# ---------------------------------------------------------------------------
# Income tax
# ---------------------------------------------------------------------------

class SlabBracket(BaseModel):
    """One marginal-rate slab. Brackets are right-inclusive."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    upper_bound: Optional[Money] = None    # None → unbounded final slab
    rate: Rate = Field(ge=0, le=1)

    @property
    def is_unbounded(self) -> bool:
        return self.upper_bound is None


class SurchargeBand(BaseModel):
    """Surcharge rate applied when income is strictly above income_above."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    income_above: Money = Field(ge=0)
    rate: Rate = Field(ge=0, le=1)


# Chapter VI-A claims a regime may allow, keyed as in deduction_caps.
DEDUCTION_CODES = ("sec_80c", "sec_80d", "sec_80tta", "other_old_regime", "other_new_regime")


class RegimeConfig(BaseModel):
    """
    Parameter set for one regime in one financial year.

    Surcharge policy is a CLIFF: the band rate applies to the whole tax once
    income crosses income_above. There is no marginal-relief smoothing.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)                # "OLD", "NEW", "OLD_SENIOR", ...
    label: str = ""
    brackets: Tuple[SlabBracket, ...]
    cess_rate: Rate = Field(ge=0, le=1)
    rebate_threshold: Money = Field(ge=0)          # 87A, inclusive
    rebate_cap_amount: Money = Field(ge=0)
    standard_deduction: Money = Field(default=Decimal("0"), ge=0)   # salaried, limited to salary
    # Chapter VI-A deductions this regime allows: code -> cap, None = uncapped.
    # A code missing from the map is not deductible under this regime.
    deduction_caps: Dict[str, Optional[Money]] = Field(default_factory=dict)
    surcharge_bands: Tuple[SurchargeBand, ...] = ()

    @model_validator(mode="after")
    def validate_brackets_cover_zero_to_infinity(self) -> "RegimeConfig":
        """Brackets must be non-empty, strictly ascending and end unbounded."""
        if not self.brackets:
            raise ConfigurationError(f"regime '{self.name}' has no slab brackets")

        previous = Decimal("0")
        last_index = len(self.brackets) - 1
        for index, bracket in enumerate(self.brackets):
            if bracket.is_unbounded:
                if index != last_index:
                    raise ConfigurationError(
                        f"regime '{self.name}': only the final bracket may be unbounded "
                        f"(bracket #{index} has no upper_bound)"
                    )
                continue
            if bracket.upper_bound <= previous:
                raise ConfigurationError(
                    f"regime '{self.name}': bracket #{index} upper_bound "
                    f"{bracket.upper_bound} must be greater than {previous} "
                    "(brackets unsorted or overlapping)"
                )
            previous = bracket.upper_bound

        if not self.brackets[-1].is_unbounded:
            raise ConfigurationError(
                f"regime '{self.name}': final bracket must be unbounded "
                f"(ends at {self.brackets[-1].upper_bound})"
            )
        return self

    @model_validator(mode="after")
    def validate_surcharge_bands_ascending(self) -> "RegimeConfig":
        thresholds = [band.income_above for band in self.surcharge_bands]
        if any(a >= b for a, b in zip(thresholds, thresholds[1:])):
            raise ConfigurationError(
                f"regime '{self.name}': surcharge bands must be strictly ascending "
                f"by income_above, got {[str(t) for t in thresholds]}"
            )
        return self

    @model_validator(mode="after")
    def validate_deduction_caps(self) -> "RegimeConfig":
        for code, cap in self.deduction_caps.items():
            if code not in DEDUCTION_CODES:
                raise ConfigurationError(
                    f"regime '{self.name}': unknown deduction code '{code}', "
                    f"expected one of {list(DEDUCTION_CODES)}"
                )
            if cap is not None and cap < 0:
                raise ConfigurationError(f"regime '{self.name}': cap for '{code}' is negative")
        return self

    def deduction_allowed(self, code: str, claimed: Decimal) -> Decimal:
        """The part of a claimed deduction this regime allows."""
        if code not in self.deduction_caps:
            return Decimal("0")
        cap = self.deduction_caps[code]
        return claimed if cap is None else min(claimed, cap)


class SpecialRate(BaseModel):
    """Flat rate for income taxed outside the slabs (capital gains, lottery)."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    code: str = Field(min_length=1)      # "stcg_111a_20", "lottery", ...
    label: str = ""
    rate: Rate = Field(ge=0, le=1)


# ---------------------------------------------------------------------------
# TDS / TCS
# ---------------------------------------------------------------------------

class TdsSection(BaseModel):
    """
    One TDS/TCS section.

    threshold None  → no threshold; every payment is subject to deduction.
    threshold set   → payments strictly below it are not subject to deduction.

    no_pan_rate >= base_rate (Section 206AA / 206CC): a missing PAN never
    lowers the deduction.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    code: str = Field(min_length=1)
    label: str
    description: str = ""
    category: TaxCategory = TaxCategory.tds
    residency: Residency = Residency.resident
    statutory_section: str = ""          # e.g. "195 / 115A" for non-resident entries
    base_rate: Rate = Field(ge=0, le=1)
    no_pan_rate: Rate = Field(ge=0, le=1)
    threshold: Optional[Money] = Field(default=None, ge=0)
    threshold_note: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def validate_no_pan_rate_not_lower(self) -> "TdsSection":
        if self.no_pan_rate < self.base_rate:
            raise ConfigurationError(
                f"section '{self.code}': no_pan_rate {self.no_pan_rate} is lower than "
                f"base_rate {self.base_rate}"
            )
        return self


# ---------------------------------------------------------------------------
# RateTable — one financial year
# ---------------------------------------------------------------------------

class RateTable(BaseModel):
    """
    Every regime, special rate and TDS/TCS section for one financial year.

    Regimes, special rates and sections are stored as tuples (immutable,
    ordered as in the source artifact); lookup maps are built once in
    model_post_init.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    financial_year: str = Field(min_length=1)     # "FY2025-26"
    assessment_year: str = ""                     # "AY2026-27"
    regimes: Tuple[RegimeConfig, ...]
    tds_sections: Tuple[TdsSection, ...] = ()
    special_rates: Tuple[SpecialRate, ...] = ()

    _regimes_by_name: Dict[str, RegimeConfig] = PrivateAttr(default_factory=dict)
    _sections_by_code: Dict[str, TdsSection] = PrivateAttr(default_factory=dict)
    _special_rates_by_code: Dict[str, SpecialRate] = PrivateAttr(default_factory=dict)

    @field_validator("regimes")
    @classmethod
    def validate_regime_names_unique(cls, regimes: Tuple[RegimeConfig, ...]) -> Tuple[RegimeConfig, ...]:
        _reject_duplicates([r.name for r in regimes], "regime name")
        return regimes

    @field_validator("tds_sections")
    @classmethod
    def validate_section_codes_unique(cls, sections: Tuple[TdsSection, ...]) -> Tuple[TdsSection, ...]:
        _reject_duplicates([s.code for s in sections], "section code")
        return sections

    @field_validator("special_rates")
    @classmethod
    def validate_special_rate_codes_unique(cls, rates: Tuple[SpecialRate, ...]) -> Tuple[SpecialRate, ...]:
        _reject_duplicates([r.code for r in rates], "special rate code")
        return rates

    def model_post_init(self, __context: Any) -> None:
        self._regimes_by_name = {r.name: r for r in self.regimes}
        self._sections_by_code = {s.code: s for s in self.tds_sections}
        self._special_rates_by_code = {r.code: r for r in self.special_rates}

    def regime(self, name: str) -> RegimeConfig:
        try:
            return self._regimes_by_name[name]
        except KeyError:
            raise NotFound("regime", f"{name} ({self.financial_year})") from None

    def section(self, code: str) -> TdsSection:
        try:
            return self._sections_by_code[code]
        except KeyError:
            raise NotFound("section code", f"{code} ({self.financial_year})") from None

    def special_rate(self, code: str) -> SpecialRate:
        try:
            return self._special_rates_by_code[code]
        except KeyError:
            raise NotFound("special rate code", f"{code} ({self.financial_year})") from None

    def with_section_override(self, code: str, **changes: Any) -> "RateTable":
        """
        Return a NEW table with one section's fields replaced.

        The whole table is rebuilt through validation, so an override that breaks
        an invariant (e.g. no_pan_rate below base_rate) raises ConfigurationError
        and the original table is untouched.
        """
        current = self.section(code)
        if "code" in changes:
            raise ConfigurationError(f"section '{code}': code cannot be overridden")
        updated = {**current.model_dump(), **changes}
        sections = [
            updated if s.code == code else s.model_dump()
            for s in self.tds_sections
        ]
        try:
            return RateTable.model_validate(
                {**self.model_dump(exclude={"tds_sections"}), "tds_sections": sections}
            )
        except ValidationError as exc:
            raise ConfigurationError(str(exc), source=f"override of section '{code}'") from exc


def _reject_duplicates(keys: list[str], what: str) -> None:
    seen: set[str] = set()
    for key in keys:
        if key in seen:
            raise ConfigurationError(f"duplicate {what} '{key}'")
        seen.add(key)


__all__ = [
    "TaxCategory",
    "Residency",
    "SlabBracket",
    "SurchargeBand",
    "DEDUCTION_CODES",
    "RegimeConfig",
    "SpecialRate",
    "TdsSection",
    "RateTable",
]
