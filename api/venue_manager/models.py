from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import date

from iwems.models import BookingStatus


class VenueCreate(BaseModel):
    name: str
    location: str
    description: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=0)
    price_per_day: Optional[float] = Field(default=None, ge=0)
    amenities: Optional[str] = Field(default=None, description="Comma separated, e.g. 'Parking, Garden'")

    @field_validator("name", "location")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Venue name and location are required")
        return value.strip()

    def amenity_list(self) -> Optional[List[str]]:
        items = [a.strip() for a in (self.amenities or "").split(",") if a.strip()]
        return items or None

    def to_record(self, manager_id: str) -> dict:
        return {
            "manager_id": manager_id,
            "name": self.name,
            "location": self.location,
            "description": self.description or None,
            "capacity": self.capacity,
            "price_per_day": self.price_per_day,
            "amenities": self.amenity_list(),
        }


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class AvailabilityToggle(BaseModel):
    venue_id: str
    day: date
