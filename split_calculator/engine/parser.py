"""
Ratio Parser

Turns free text such as "50, 30, 20", "50 30 20" or "50-30-20" into a list
of percentages.

Known limitation: '-' is a separator, so negative values cannot be typed.
"-50" parses as [50]. The validator rejects non-positive values anyway.
"""

import math
import re
from collections.abc import Sequence

from split_calculator.engine.money import format_percent

SEPARATORS = re.compile(r"[,\s-]+")

# Leading numeric prefix of a token: "50%" -> "50", "12.5abc" -> "12.5".
NUMERIC_PREFIX = re.compile(r"^[+]?(?:\d+\.?\d*|\.\d+)(?:[eE][+]?\d+)?")


def _parse_token(token: str):
    match = NUMERIC_PREFIX.match(token)
    if match is None:
        return None
    value = float(match.group(0))
    if not math.isfinite(value):
        return None
    return value


def parse(text: str) -> list[float]:
    """
    Extract percentages from free text.
    
    Runs of commas, whitespace and hyphens act as one separator.
    Tokens that are not numbers are dropped silently.
    
    Returns:
        Numbers in left-to-right order; [] for blank or all-garbage input
    """
    if not text:
        return []
    
    values = []
    for token in SEPARATORS.split(text):
        token = token.strip()
        if not token:
            continue
        value = _parse_token(token)
        if value is not None:
            values.append(value)
    return values


def format_components(components: Sequence[float]) -> str:
    """Render percentages for an edit field: [50, 30, 20] -> '50, 30, 20'."""
    return ", ".join(format_percent(value) for value in components)
