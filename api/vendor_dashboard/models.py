from pydantic import BaseModel, field_validator
from typing import Optional

from iwems.models import InquiryStatus, VendorCategory


class VendorProfileForm(BaseModel):
    business_name: str
    category: VendorCategory
    description: Optional[str] = None
    location: Optional[str] = None
    price_range: Optional[str] = None

    @field_validator("business_name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Business name is required")
        return value.strip()

    def to_record(self, user_id: str) -> dict:
        return {
            "user_id": user_id,
            "business_name": self.business_name,
            "category": self.category.value,
            "description": self.description or None,
            "location": self.location or None,
            "price_range": self.price_range or None,
        }


class InquiryStatusUpdate(BaseModel):
    status: InquiryStatus


class PortfolioImageRemove(BaseModel):
    image_url: str
