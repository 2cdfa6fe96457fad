"""Percent Applicator: apply one percentage to a total."""

from split_calculator.engine.money import format_currency, parse_currency
from split_calculator.models.split import AppliedShare


def apply(total: float, percent: float) -> AppliedShare:
    """
    Apply `percent` to `total`.
    
    Args:
        total: Non-negative amount, already validated by the caller
        percent: Any finite percentage
        
    Returns:
        AppliedShare with the exact share, its currency string and the
        numeric value of that string
    """
    exact = total * (percent / 100)
    rounded = format_currency(exact)
    return AppliedShare(
        percent=percent,
        exact=exact,
        rounded=rounded,
        rounded_value=parse_currency(rounded),
    )
