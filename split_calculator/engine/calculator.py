"""
Calculation of the derived split state.

Given the entered total and the selected ratio, computes every share, the
exact and rounded totals, and the reconciliation between them. The result
is recomputed on each input change and never stored.
"""

import math
from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
from typing import Optional

from split_calculator.engine.applicator import apply
from split_calculator.engine.reconciler import reconcile
from split_calculator.models.split import SplitCalculation, SplitRatio
from split_calculator.errors import InvalidTotal

MAX_TOTAL_DECIMALS = 2


def parse_total(text: Optional[str]) -> float:
    """
    Parse the entered dollar total.
    
    Blank input means 0. Otherwise the text must be a finite, non-negative
    number with at most two digits after the decimal point.
    
    Raises:
        InvalidTotal: If the text breaks any of those rules
    """
    if text is None or not text.strip():
        return 0.0
    
    cleaned = text.strip()
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise InvalidTotal(f"'{cleaned}' is not a dollar amount") from None
    
    if not amount.is_finite():
        raise InvalidTotal(f"'{cleaned}' is not a dollar amount")
    if amount < 0:
        raise InvalidTotal("The total cannot be negative")
    if amount.as_tuple().exponent < -MAX_TOTAL_DECIMALS:
        raise InvalidTotal("Use at most two decimal places for the total")
    
    result = float(amount)
    if not math.isfinite(result):
        raise InvalidTotal("The total is too large to split")
    return result


def calculate(total: float, ratio: SplitRatio) -> SplitCalculation:
    """
    Split `total` across `ratio`.
    
    exact_total sums the unrounded shares; rounded_total sums the numeric
    value of each currency-rounded share.
    """
    shares = tuple(apply(total, percent) for percent in ratio.components)
    
    exact_total = 0.0
    rounded_total = 0.0
    for share in shares:
        exact_total += share.exact
        rounded_total += share.rounded_value
    
    return SplitCalculation(
        total=total,
        ratio=ratio,
        shares=shares,
        exact_total=exact_total,
        rounded_total=rounded_total,
        reconciliation=reconcile(exact_total, rounded_total),
    )


def resolve_selection(
    entries: Sequence[SplitRatio],
    name: Optional[str],
) -> Optional[SplitRatio]:
    """
    Find the selected ratio by name.
    
    Falls back to the first entry when the name is unknown (e.g. the
    selected ratio was just deleted). Returns None only for no entries.
    """
    if not entries:
        return None
    if name is not None:
        for entry in entries:
            if entry.name == name:
                return entry
    return entries[0]
