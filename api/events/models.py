from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date

from iwems.models import EventStatus


class EventCreate(BaseModel):
    title: str
    event_date: date = Field(..., description="The selected event date (required)")
    description: Optional[str] = None
    venue_location: Optional[str] = None
    budget: Optional[float] = Field(default=None, ge=0)
    guest_count: Optional[int] = Field(default=None, ge=0)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Event title is required")
        return value.strip()

    def to_record(self, couple_id: str) -> dict:
        return {
            "couple_id": couple_id,
            "title": self.title,
            "description": self.description or None,
            "event_date": self.event_date.isoformat(),
            "venue_location": self.venue_location or None,
            "budget": self.budget,
            "guest_count": self.guest_count or 0,
            "status": EventStatus.PLANNING.value,
        }


class EventStatusUpdate(BaseModel):
    status: EventStatus
