"""
Token request data models for the OPD Token Allocator.

This module defines the 'Demand' side of the allocator:
1. TokenSource (where a request came from, which decides its priority)
2. PRIORITY_RANK (explicit rank table, kept next to the enum)
3. TokenRequest (one patient's claim on one unit of slot capacity)
"""

import uuid
from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import datetime, timezone


class TokenSource(str, Enum):
    """Channels a token request can arrive through."""
    EMERGENCY = "EMERGENCY"
    PRIORITY = "PRIORITY"       # paid priority patients
    FOLLOW_UP = "FOLLOW_UP"
    ONLINE = "ONLINE"
    WALK_IN = "WALK_IN"


# Higher rank is served first. Requests without a source rank 0.
PRIORITY_RANK: Dict[TokenSource, int] = {
    TokenSource.EMERGENCY: 5,
    TokenSource.PRIORITY: 4,
    TokenSource.FOLLOW_UP: 3,
    TokenSource.ONLINE: 2,
    TokenSource.WALK_IN: 1,
}


def priority_rank(source: Optional[TokenSource]) -> int:
    """Look up the rank of a source in PRIORITY_RANK."""
    if source is None:
        return 0
    return PRIORITY_RANK[source]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenRequest(BaseModel):
    """
    A patient's request for a token.
    Immutable once built; cancellation removes it from the ledger instead of editing it.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Generated request id")
    patient_id: str = Field(min_length=1, description="Who the token is for")
    source: TokenSource = Field(description="Arrival channel, decides priority")

    preferred_slot_id: Optional[str] = Field(
        default=None,
        description="If set, the request competes for this slot only"
    )
    follow_up: bool = Field(default=False, description="Patient is returning for a follow-up")
    created_at: datetime = Field(
        default_factory=_utcnow,
        description="Submission time, only used to break ties inside a priority class"
    )

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "patient_id": "P-online-1",
            "source": "ONLINE",
            "preferred_slot_id": "drA-09",
            "follow_up": False
        }
    })

    @field_validator('source', mode='before')
    @classmethod
    def normalise_source(cls, v):
        """Accept 'online', ' Walk-In ' etc. Unknown names still fail enum validation."""
        if isinstance(v, str) and not isinstance(v, TokenSource):
            return v.strip().upper().replace("-", "_")
        return v

    @field_validator('preferred_slot_id', mode='before')
    @classmethod
    def blank_preference_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('created_at')
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are taken as UTC so every request compares with every other."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def rank(self) -> int:
        return priority_rank(self.source)
