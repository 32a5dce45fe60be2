"""
Progressive slab evaluator — pure, deterministic, exact Decimal.

Brackets are right-inclusive: an income exactly on an upper bound is taxed
entirely in the lower bracket. The result is NOT rounded; callers round once
when building their result.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from taxengine.money import ZERO, Number, non_negative
from taxengine.rate_tables.schemas import SlabBracket


def compute_slab_tax(income: Number, brackets: Sequence[SlabBracket]) -> Decimal:
    """
    Apply progressive slab tax to income.

    Raises:
        InvalidInput: income is negative, NaN, infinite or not a number. The
            evaluator never clamps.
    """
    taxable = non_negative(income, "income")

    tax = ZERO
    previous_upper_bound = ZERO
    for bracket in brackets:
        if bracket.is_unbounded:
            tax += (taxable - previous_upper_bound) * bracket.rate
            break
        slab_income = max(ZERO, min(taxable, bracket.upper_bound) - previous_upper_bound)
        tax += slab_income * bracket.rate
        if taxable <= bracket.upper_bound:
            break
        previous_upper_bound = bracket.upper_bound
    return tax
