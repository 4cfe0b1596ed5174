"""
Financial data types for portfolio valuation.

This module provides float-based helpers for valuation and reporting.
Portfolio sizes are in the hundreds of holdings, so plain float
arithmetic is precise enough; the helpers keep rounding and
zero-denominator handling consistent across the engine.

Precision considerations:
- Float64 provides ~15-16 significant decimal digits
- Totals are compared with a relative tolerance, never with ==
- Division by zero never raises; guarded helpers return ZERO
"""

import math

# Reporting precision (number of decimal places)
PERCENTAGE_DECIMALS = 4  # Percentages

# Common financial values as float constants
ZERO = 0.0
ONE = 1.0
HUNDRED = 100.0


def round_percentage(percentage: float) -> float:
    """Round a percentage for reporting."""
    return round(percentage, PERCENTAGE_DECIMALS)


def round_half_up(value: float) -> float:
    """Round to the nearest integer, halves away from zero.

    Python's round() uses banker's rounding; derived prices need
    the commercial convention.

    Examples:
        >>> round_half_up(2.5)
        3.0
        >>> round_half_up(-2.5)
        -3.0
    """
    return math.copysign(math.floor(abs(value) + 0.5), value)


def safe_divide(numerator: float, denominator: float | None) -> float:
    """Divide, returning ZERO when the denominator is zero or missing.

    Examples:
        >>> safe_divide(10.0, 4.0)
        2.5
        >>> safe_divide(10.0, 0.0)
        0.0
    """
    if not denominator:
        return ZERO
    return numerator / denominator


def percentage_of(value: float, total: float | None) -> float:
    """Express value as a percentage of total, ZERO for an empty total."""
    return safe_divide(value * HUNDRED, total)


def relative_change_percent(old: float | None, new: float | None) -> float | None:
    """Percentage change from old to new.

    Returns:
        (new / old - 1) * 100, or None when old is missing or not positive
    """
    if old is None or new is None or old <= ZERO:
        return None
    return (new / old - ONE) * HUNDRED


def relative_close(a: float, b: float, rel_tol: float = 1e-6) -> bool:
    """Compare floats with a relative tolerance, exact near zero."""
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=1e-9)
