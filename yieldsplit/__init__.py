"""
Yield splitter: tokenize an underlying asset into principal (PT) and yield (YT)
claims, trade them on a time-weighted curve, and settle at maturity.
"""

__version__ = "0.1.0"
