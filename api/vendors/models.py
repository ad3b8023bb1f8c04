from pydantic import BaseModel, field_validator
from typing import Optional

from iwems.models import InquiryStatus


class InquiryCreate(BaseModel):
    vendor_id: str
    event_id: str
    message: Optional[str] = None

    @field_validator("vendor_id", "event_id")
    @classmethod
    def selection_required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Please select a vendor and an event")
        return value

    def to_record(self, inquirer_id: str) -> dict:
        return {
            "vendor_id": self.vendor_id,
            "event_id": self.event_id,
            "inquirer_id": inquirer_id,
            "message": self.message or None,
            "status": InquiryStatus.PENDING.value,
        }
