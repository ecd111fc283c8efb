"""
Allocation Store.

This module holds the 'Result' of one rebalance:
1. Current tokens, indexed by request and by slot.
2. Per-slot sequence counters for the rebuild in progress.
3. Requests the rebuild could not place (recomputed every time, never queued).
"""

from datetime import datetime
from typing import List, Dict, Any, Optional
from collections import defaultdict

from models import AllocatedToken, TokenRequest, TokenStatus, TokenSource


class AllocationStore:
    """
    Materialized allocation for one rebuild.
    The engine fills a fresh store during rebalance and then swaps it in whole;
    a published store is only read from.
    """

    def __init__(self):
        # The Master Allocation
        self.tokens_by_request: Dict[str, AllocatedToken] = {}

        # Slot Index (kept in sequence order because assign() appends)
        self.tokens_by_slot: Dict[str, List[AllocatedToken]] = defaultdict(list)
        self.sequence_counters: Dict[str, int] = defaultdict(int)

        # Requests left without room in this rebuild
        self.unallocated: Dict[str, TokenRequest] = {}

    def assign(self, request: TokenRequest, slot_id: str, allocated_at: datetime) -> AllocatedToken:
        """
        Commit a request to a slot.
        Takes the next sequence number for that slot and records a CONFIRMED token.
        """
        self.sequence_counters[slot_id] += 1
        token = AllocatedToken(
            request=request,
            slot_id=slot_id,
            sequence=self.sequence_counters[slot_id],
            status=TokenStatus.CONFIRMED,
            allocated_at=allocated_at
        )
        self.tokens_by_request[request.id] = token
        self.tokens_by_slot[slot_id].append(token)
        return token

    def mark_unallocated(self, request: TokenRequest) -> None:
        self.unallocated[request.id] = request

    def used(self, slot_id: str) -> int:
        """How many tokens does this slot hold so far?"""
        return len(self.tokens_by_slot.get(slot_id, ()))

    # --- Query Methods ---

    def all(self) -> List[AllocatedToken]:
        return list(self.tokens_by_request.values())

    def for_slot(self, slot_id: str) -> List[AllocatedToken]:
        """Tokens in one slot, by sequence. Unknown slots give an empty list."""
        return sorted(self.tokens_by_slot.get(slot_id, ()), key=lambda t: t.sequence)

    def for_request(self, request_id: str) -> Optional[AllocatedToken]:
        return self.tokens_by_request.get(request_id)

    def unallocated_requests(self) -> List[TokenRequest]:
        """Requests this rebuild could not place, in priority order."""
        return list(self.unallocated.values())

    def __len__(self) -> int:
        return len(self.tokens_by_request)

    # --- Reporting Methods ---

    def get_statistics(self) -> Dict[str, Any]:
        """
        Summary of the current rebuild: totals, per-source breakdown, per-slot usage.
        """
        source_stats = {
            source.value: {"allocated": 0, "unallocated": 0} for source in TokenSource
        }

        for token in self.tokens_by_request.values():
            source_stats[token.source.value]["allocated"] += 1

        for request in self.unallocated.values():
            source_stats[request.source.value]["unallocated"] += 1

        total_demand = len(self.tokens_by_request) + len(self.unallocated)
        rate = (len(self.tokens_by_request) / total_demand * 100) if total_demand else 0.0

        return {
            "allocated": len(self.tokens_by_request),
            "unallocated": len(self.unallocated),
            "allocation_rate": f"{rate:.1f}%",
            "source_breakdown": source_stats,
            "slot_usage": {slot_id: len(tokens) for slot_id, tokens in self.tokens_by_slot.items()},
        }
