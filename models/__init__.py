"""
Data models package for the OPD Token Allocator.

This package exports the three pillars of the data model:
1. Demand (TokenRequest, TokenSource, PRIORITY_RANK)
2. Supply (TimeSlot)
3. Output (AllocatedToken, TokenStatus)
"""

from .request import (
    TokenRequest,
    TokenSource,
    PRIORITY_RANK,
    priority_rank
)

from .slot import (
    TimeSlot
)

from .token import (
    AllocatedToken,
    TokenStatus,
    TERMINAL_STATUSES
)

__all__ = [
    # --- Demand Models ---
    "TokenRequest",
    "TokenSource",
    "PRIORITY_RANK",
    "priority_rank",

    # --- Supply Models ---
    "TimeSlot",

    # --- Output Models ---
    "AllocatedToken",
    "TokenStatus",
    "TERMINAL_STATUSES",
]
