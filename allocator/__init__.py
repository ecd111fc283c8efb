"""
Allocation engine package.

Registry (slots) and Ledger (active requests) feed the engine, which rebuilds
the Allocation Store from scratch on every mutation.
"""

from .engine import TokenAllocationEngine
from .registry import SlotRegistry
from .ledger import RequestLedger
from .state import AllocationStore
from .invariants import InvariantViolation, Violation

__all__ = [
    "TokenAllocationEngine",
    "SlotRegistry",
    "RequestLedger",
    "AllocationStore",
    "InvariantViolation",
    "Violation",
]
