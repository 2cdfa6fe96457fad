"""
Split Engine Package

Pure computations behind the calculator: applying percentages, validating
and parsing ratios, and reconciling exact against rounded totals.
"""

from split_calculator.engine.applicator import apply
from split_calculator.engine.calculator import (
    calculate,
    parse_total,
    resolve_selection,
)
from split_calculator.engine.money import (
    format_currency,
    parse_currency,
    round_half_away,
    to_single_precision,
)
from split_calculator.engine.parser import format_components, parse
from split_calculator.engine.reconciler import reconcile
from split_calculator.engine.validator import describe_problem, validate

__all__ = [
    "apply",
    "calculate",
    "describe_problem",
    "format_components",
    "format_currency",
    "parse",
    "parse_currency",
    "parse_total",
    "reconcile",
    "resolve_selection",
    "round_half_away",
    "to_single_precision",
    "validate",
]
