"""
Allocation invariant checks.

These answer one question after every rebuild: "Is this allocation legal?"
A failure here is a defect in the engine, never a user error.
"""

from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .ledger import RequestLedger
    from .registry import SlotRegistry
    from .state import AllocationStore


@dataclass
class Violation:
    """Detailed reason an allocation is illegal."""
    invariant: str  # e.g. "Capacity", "Sequence", "Orphan"
    reason: str
    slot_id: Optional[str] = None
    request_id: Optional[str] = None


class InvariantViolation(AssertionError):
    """Raised when a rebuild produces an illegal allocation."""

    def __init__(self, violations: List[Violation]):
        self.violations = violations
        summary = "; ".join(f"[{v.invariant}] {v.reason}" for v in violations)
        super().__init__(f"Allocation invariant violated: {summary}")


def check_allocation(
    store: "AllocationStore",
    registry: "SlotRegistry",
    ledger: "RequestLedger"
) -> List[Violation]:
    """Return every broken invariant. An empty list means the allocation is legal."""
    violations: List[Violation] = []

    # 1. Slot level: known slot, within capacity, sequence 1..n
    for slot_id in store.tokens_by_slot:
        tokens = store.for_slot(slot_id)
        if not tokens:
            continue

        slot = registry.get(slot_id)
        if slot is None:
            violations.append(Violation("UnknownSlot", f"Tokens reference unknown slot {slot_id}", slot_id=slot_id))
            continue

        if len(tokens) > slot.capacity:
            violations.append(Violation(
                "Capacity",
                f"{slot_id} holds {len(tokens)} tokens, capacity is {slot.capacity}",
                slot_id=slot_id
            ))

        sequences = [t.sequence for t in tokens]
        if sequences != list(range(1, len(tokens) + 1)):
            violations.append(Violation(
                "Sequence",
                f"{slot_id} sequences {sequences} are not contiguous from 1",
                slot_id=slot_id
            ))

    # 2. Request level: one token per active request, no removed requests
    seen = set()
    for slot_tokens in store.tokens_by_slot.values():
        for token in slot_tokens:
            if token.request_id in seen:
                violations.append(Violation(
                    "Duplicate",
                    f"Request {token.request_id} holds more than one token",
                    slot_id=token.slot_id,
                    request_id=token.request_id
                ))
            seen.add(token.request_id)

            if token.request_id not in ledger:
                violations.append(Violation(
                    "Orphan",
                    f"Token {token.token_id} references removed request {token.request_id}",
                    slot_id=token.slot_id,
                    request_id=token.request_id
                ))

    if seen != set(store.tokens_by_request):
        violations.append(Violation("Index", "Request index and slot index disagree"))

    return violations


def assert_allocation(store: "AllocationStore", registry: "SlotRegistry", ledger: "RequestLedger") -> None:
    violations = check_allocation(store, registry, ledger)
    if violations:
        raise InvariantViolation(violations)
