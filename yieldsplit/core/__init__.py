"""
Core pool algorithms (pure, integer-only)
"""

from .errors import YieldSplitterError, error_for_code
from .fixed_point import BPS_DENOM, PRECISION, mul_div
from .time_weighted_amm import (
    MIN_TIME_TO_MATURITY,
    SECONDS_PER_YEAR,
    SwapQuote,
    quote_swap,
    swap_exact_in,
    time_ratio,
)

__all__ = [
    "YieldSplitterError",
    "error_for_code",
    "BPS_DENOM",
    "PRECISION",
    "mul_div",
    "MIN_TIME_TO_MATURITY",
    "SECONDS_PER_YEAR",
    "SwapQuote",
    "quote_swap",
    "swap_exact_in",
    "time_ratio",
]
