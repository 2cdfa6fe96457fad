"""
Currency helpers.

Amounts travel through the engine as floats. Rounding is done on the exact
binary value of the float via Decimal, half away from zero, so the result
does not depend on how a float happens to print.
"""

import math
import struct
from decimal import ROUND_HALF_UP, Decimal, localcontext

CURRENCY_SYMBOL = "$"

# Enough digits to quantize any finite double to cents.
_DECIMAL_PRECISION = 400


def round_half_away(value: float, places: int = 2) -> Decimal:
    """
    Round `value` to `places` decimals, ties away from zero.
    
    Decimal's ROUND_HALF_UP rounds ties away from zero for negative
    numbers too (-0.125 -> -0.13).
    """
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        return Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def round_float(value: float, places: int = 2) -> float:
    return float(round_half_away(value, places))


def format_fixed(value: float, places: int = 2) -> str:
    """Fixed-point string with exactly `places` decimals, e.g. '-0.01'."""
    quantized = round_half_away(value, places)
    if quantized == 0:
        quantized = abs(quantized)
    return f"{quantized:.{places}f}"


def format_currency(value: float) -> str:
    """
    Format as US dollars: '$1,234.57', '-$0.50'.
    
    Zero never carries a sign.
    """
    quantized = round_half_away(value, 2)
    sign = "-" if quantized < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(quantized):,.2f}"


def parse_currency(text: str) -> float:
    """Numeric value of a string produced by format_currency."""
    return float(text.replace(CURRENCY_SYMBOL, "").replace(",", ""))


def format_percent(value: float) -> str:
    """'50' for 50.0, '33.3' for 33.3."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def to_single_precision(value: float) -> float:
    """
    Reduce a double to the nearest IEEE-754 single-precision value.
    
    Finite values beyond the single-precision range become +/- infinity.
    """
    if not math.isfinite(value):
        return value
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)
