"""
Slot data model for the OPD Token Allocator.

A TimeSlot is the 'Supply' side: one doctor, one time range, a hard capacity.
"""

from pydantic import BaseModel, Field, ConfigDict, model_validator
from datetime import time


class TimeSlot(BaseModel):
    """A capacity-bounded block of one doctor's day. Never changes after creation."""

    id: str = Field(min_length=1, description="Unique identifier, e.g. 'drA-09'")
    doctor_id: str = Field(min_length=1, description="Owning doctor")
    start: time = Field(description="Slot start (wall clock, no date)")
    end: time = Field(description="Slot end (wall clock, no date)")
    capacity: int = Field(ge=1, description="Hard limit on tokens in this slot")

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "id": "drA-09",
            "doctor_id": "DrA",
            "start": "09:00:00",
            "end": "10:00:00",
            "capacity": 4
        }
    })

    @model_validator(mode='after')
    def validate_times(self):
        if self.start >= self.end:
            raise ValueError("Slot end time must be strictly after start time")
        return self
