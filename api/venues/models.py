from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date

from iwems.models import BookingStatus


class BookingRequestCreate(BaseModel):
    venue_id: str
    event_id: str
    request_date: date
    guest_count: Optional[int] = Field(default=None, ge=0)
    message: Optional[str] = None

    @field_validator("venue_id", "event_id")
    @classmethod
    def selection_required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Please select a venue and an event")
        return value

    def to_record(self, requester_id: str) -> dict:
        return {
            "venue_id": self.venue_id,
            "event_id": self.event_id,
            "requester_id": requester_id,
            "request_date": self.request_date.isoformat(),
            "guest_count": self.guest_count,
            "message": self.message or None,
            "status": BookingStatus.PENDING.value,
        }
