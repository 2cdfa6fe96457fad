"""
Split Ratio Validator

A ratio is valid when every percentage is strictly positive and the
percentages add up to 100, within a tolerance that absorbs floating-point
accumulation error (33.33 + 33.33 + 33.34 is fine).

The validator never raises. It always returns a verdict.
"""

import math
from collections.abc import Sequence
from typing import Optional

from split_calculator.engine.money import format_percent, round_float
from split_calculator.models.split import RatioValidation

TARGET_PERCENT = 100.0
SUM_TOLERANCE = 0.01

NO_VALUES_MESSAGE = (
    "Please enter valid percentage values "
    "(separated by commas, spaces, or hyphens)"
)
NOT_POSITIVE_MESSAGE = "All percentages must be positive numbers"
NOT_FINITE_MESSAGE = "All percentages must be finite numbers"


def validate(components: Sequence[float]) -> RatioValidation:
    """
    Check a sequence of percentages.
    
    Returns:
        RatioValidation; `sum` and `remaining` are rounded to 2 decimals,
        validity is decided on the unrounded sum.
    """
    if not components:
        return RatioValidation(is_valid=False, sum=0.0, remaining=TARGET_PERCENT)
    
    total = 0.0
    for value in components:
        total += float(value)
    remaining = TARGET_PERCENT - total
    
    if not math.isfinite(total):
        # NaN and infinity cannot be rounded to cents
        return RatioValidation(is_valid=False, sum=total, remaining=remaining)
    
    is_valid = (
        abs(remaining) < SUM_TOLERANCE
        and all(value > 0 for value in components)
    )
    
    return RatioValidation(
        is_valid=is_valid,
        sum=round_float(total, 2),
        remaining=round_float(remaining, 2),
    )


def describe_problem(components: Sequence[float]) -> Optional[str]:
    """
    User-facing explanation of why `components` is not a valid ratio.
    
    Returns None when the ratio is valid.
    """
    if not components:
        return NO_VALUES_MESSAGE
    
    result = validate(components)
    if result.is_valid:
        return None
    
    if not math.isfinite(result.sum):
        return NOT_FINITE_MESSAGE
    
    if any(value <= 0 for value in components):
        return NOT_POSITIVE_MESSAGE
    
    return (
        f"Percentages must sum to 100 "
        f"(current sum: {format_percent(result.sum)}%, "
        f"remaining: {format_percent(result.remaining)}%)"
    )
