"""
Allocation output models for the OPD Token Allocator.

An AllocatedToken is what a request turns into when a rebalance finds it room.
"""

import uuid
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime, timezone

from .request import TokenRequest, TokenSource


class TokenStatus(str, Enum):
    """Status of an allocated token."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


TERMINAL_STATUSES = (TokenStatus.CANCELLED, TokenStatus.NO_SHOW)


class AllocatedToken(BaseModel):
    """
    A request's place in a slot, as decided by the latest rebalance.
    Rebuilt wholesale on every rebalance; only `status` is ever changed in place,
    and only to a terminal marker when the request leaves the ledger.
    """

    token_id: str = Field(default_factory=lambda: str(uuid.uuid4()), frozen=True, description="Generated token id")
    request: TokenRequest = Field(frozen=True, description="The request this token satisfies (read-only)")
    slot_id: str = Field(frozen=True, description="Slot the token occupies")
    sequence: int = Field(ge=1, frozen=True, description="1-based position inside the slot")
    status: TokenStatus = Field(default=TokenStatus.CONFIRMED)
    allocated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), frozen=True)

    model_config = ConfigDict(validate_assignment=True)

    @property
    def request_id(self) -> str:
        return self.request.id

    @property
    def patient_id(self) -> str:
        return self.request.patient_id

    @property
    def source(self) -> TokenSource:
        return self.request.source

    def mark(self, status: TokenStatus) -> "AllocatedToken":
        """Stamp a terminal status on a token that is leaving the store."""
        status = TokenStatus(status)
        if status not in TERMINAL_STATUSES:
            raise ValueError(f"{status.value} is not a terminal token status")
        self.status = status
        return self
