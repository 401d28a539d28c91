"""
Rate limiting package for the Gateway.

Holds the in-process sliding window limiter that enforces per-key minute
and hour ceilings.
"""

from .sliding_window import RateWindowState, SlidingWindowRateLimiter

__all__ = [
    "RateWindowState",
    "SlidingWindowRateLimiter",
]
