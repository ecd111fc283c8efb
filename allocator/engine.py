"""
The OPD Token Allocation Engine.

This module implements the core "Rebalance" logic:
1. Priority Ordering (explicit rank table, FIFO inside a class) - decides who is served first.
2. Candidate Selection (preferred slot only, or every slot earliest-first) - decides where.
3. First-Fit Placement (first candidate with room) - commits the token.

Every mutation rebuilds the whole allocation. A later high-priority request can
therefore push an earlier, lower-priority one out of its slot; the pushed request
stays in the ledger and simply has no token until a rebuild finds it room.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Any, Union

from models import AllocatedToken, TimeSlot, TokenRequest, TokenSource, TokenStatus
from .clock import MonotonicClock
from .invariants import assert_allocation
from .ledger import RequestLedger
from .registry import SlotRegistry
from .state import AllocationStore

logger = logging.getLogger(__name__)


def request_order_key(request: TokenRequest):
    """Rank descending, then first submitted, then request id."""
    return (-request.rank, request.created_at, request.id)


class TokenAllocationEngine:
    """
    In-memory allocation engine.
    Owns the ledger and the current store; one lock serialises every operation.
    """

    def __init__(self, slots: Iterable[TimeSlot], clock: Optional[Callable[[], datetime]] = None):
        self.registry = SlotRegistry(slots)
        self.ledger = RequestLedger()
        self.store = AllocationStore()
        self.clock = clock or MonotonicClock()

        # Whole-state lock: ledger and store change together
        self._lock = threading.RLock()

    # --- Mutating Operations ---

    def submit_request(
        self,
        patient_id: str,
        source: Union[TokenSource, str],
        preferred_slot_id: Optional[str] = None,
        follow_up: bool = False
    ) -> TokenRequest:
        """
        Add a request and rebalance.
        An invalid source raises pydantic.ValidationError before anything changes.
        The request is always accepted, even when no slot has room.
        """
        with self._lock:
            request = TokenRequest(
                patient_id=patient_id,
                source=source,
                preferred_slot_id=preferred_slot_id,
                follow_up=follow_up,
                created_at=self.clock()
            )
            return self.add_request(request)

    def add_request(self, request: TokenRequest) -> TokenRequest:
        """Add an already-built request (e.g. one with a fixed id) and rebalance."""
        with self._lock:
            if request.preferred_slot_id and request.preferred_slot_id not in self.registry:
                logger.warning(
                    f"Request {request.id} prefers unknown slot {request.preferred_slot_id}; "
                    "treating it as having no preference."
                )
            self.ledger.submit(request)
            try:
                self._rebalance()
            except Exception:
                # The store was never swapped; take the request back out so ledger and store agree
                self.ledger.remove(request.id)
                raise
            logger.info(f"Submitted {request.source.value} request {request.id} for {request.patient_id}")
            return request

    def cancel_request(self, request_id: str) -> Optional[AllocatedToken]:
        """
        Remove a request and rebalance.
        Returns the discarded token (marked CANCELLED) if the request held one.
        Unknown or already-removed ids are a no-op.
        """
        with self._lock:
            token = self.store.for_request(request_id)
            if token is not None:
                token.mark(TokenStatus.CANCELLED)

            removed = self.ledger.remove(request_id)
            if removed is None:
                logger.debug(f"Cancel for unknown request {request_id} ignored")
            else:
                logger.info(f"Cancelled request {request_id}")

            self._rebalance()
            return token

    def mark_no_show(self, request_id: str) -> Optional[AllocatedToken]:
        """
        Record that an allocated patient did not turn up.
        Only acts on a request that currently holds a token; otherwise a no-op.
        """
        with self._lock:
            token = self.store.for_request(request_id)
            if token is None:
                logger.debug(f"No-show for unallocated or unknown request {request_id} ignored")
                return None

            token.mark(TokenStatus.NO_SHOW)
            self.ledger.remove(request_id)
            logger.info(f"Request {request_id} marked no-show in {token.slot_id} (#{token.sequence})")
            self._rebalance()
            return token

    # --- Query Operations ---

    def list_slots(self) -> List[TimeSlot]:
        with self._lock:
            return self.registry.list()

    def list_allocations(self, slot_id: Optional[str] = None) -> List[AllocatedToken]:
        """All current tokens, or one slot's tokens ordered by sequence."""
        with self._lock:
            if slot_id is None:
                return self.store.all()
            return self.store.for_slot(slot_id)

    def get_allocation(self, request_id: str) -> Optional[AllocatedToken]:
        with self._lock:
            return self.store.for_request(request_id)

    def get_request(self, request_id: str) -> Optional[TokenRequest]:
        with self._lock:
            return self.ledger.get(request_id)

    def list_requests(self) -> List[TokenRequest]:
        with self._lock:
            return self.ledger.snapshot()

    def unallocated_requests(self) -> List[TokenRequest]:
        """Active requests the latest rebuild could not place, in priority order."""
        with self._lock:
            return self.store.unallocated_requests()

    def get_statistics(self) -> Dict[str, Any]:
        with self._lock:
            stats = self.store.get_statistics()
            stats["active_requests"] = len(self.ledger)
            stats["slots"] = len(self.registry)
            stats["capacity"] = sum(slot.capacity for slot in self.registry)
            return stats

    # --- Rebalance ---

    def _rebalance(self) -> None:
        """
        Rebuild the allocation from scratch.
        Caller must hold the lock.
        """
        previous = self.store
        store = AllocationStore()
        allocated_at = self.clock()

        # 1. Priority order: highest rank first, FIFO within a rank
        ordered = sorted(self.ledger.snapshot(), key=request_order_key)

        # 2. First fit over each request's candidates
        for request in ordered:
            for slot in self._candidate_slots(request):
                if store.used(slot.id) < slot.capacity:
                    store.assign(request, slot.id, allocated_at)
                    break
            else:
                store.mark_unallocated(request)

        if __debug__:
            assert_allocation(store, self.registry, self.ledger)

        # 3. Publish
        self.store = store
        self._log_displacements(previous, store)
        logger.debug(
            f"Rebalanced {len(ordered)} requests: {len(store)} allocated, "
            f"{len(store.unallocated)} unallocated"
        )

    def _candidate_slots(self, request: TokenRequest) -> List[TimeSlot]:
        """
        The preferred slot alone when it exists (no fallback).
        Otherwise every slot, earliest start first.
        """
        preferred = self.registry.get(request.preferred_slot_id)
        if preferred is not None:
            return [preferred]
        return self.registry.by_start_time()

    def _log_displacements(self, previous: AllocationStore, current: AllocationStore) -> None:
        """Requests that had a token before this rebuild and still compete but lost it."""
        for request_id, token in previous.tokens_by_request.items():
            if request_id in current.tokens_by_request or request_id not in self.ledger:
                continue
            logger.info(
                f"Request {request_id} ({token.source.value}) displaced from "
                f"{token.slot_id} (was #{token.sequence})"
            )
