"""
Reconciliation Reporter

Compares the sum of exact shares with the sum of rounded shares.

The match test is coarse: both totals are reduced to single
precision before comparing. That ignores double-precision noise
(0.1 + 0.2 style) but still flags cent-level rounding drift.
"""

from split_calculator.engine.money import format_fixed, to_single_precision
from split_calculator.models.split import Reconciliation


def reconcile(exact_total: float, rounded_total: float) -> Reconciliation:
    """
    Report whether rounding changed the total.
    
    Never raises; the result only drives which message is shown.
    """
    difference = rounded_total - exact_total
    matches = to_single_precision(exact_total) == to_single_precision(rounded_total)
    difference_display = format_fixed(difference, 2)
    
    return Reconciliation(
        exact_total=exact_total,
        rounded_total=rounded_total,
        matches=matches,
        difference=difference,
        difference_display=difference_display,
        difference_detail=format_fixed(difference, 6),
        show_difference=not matches and difference_display != "0.00",
        totals_differ_at_cents=format_fixed(rounded_total, 2) != format_fixed(exact_total, 2),
    )
