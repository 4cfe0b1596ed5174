"""
Core type definitions and utilities.
"""

# Re-export financial utilities for easy access
from .financial import (
    HUNDRED,
    ONE,
    PERCENTAGE_DECIMALS,
    ZERO,
    percentage_of,
    relative_change_percent,
    relative_close,
    round_half_up,
    round_percentage,
    safe_divide,
)

__all__ = [
    # Utility functions
    "round_percentage",
    "round_half_up",
    "safe_divide",
    "percentage_of",
    "relative_change_percent",
    "relative_close",
    # Constants
    "PERCENTAGE_DECIMALS",
    "ZERO",
    "ONE",
    "HUNDRED",
]
