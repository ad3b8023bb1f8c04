from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class Role(str, Enum):
    COUPLE = "couple"
    PLANNER = "planner"
    VENDOR = "vendor"
    VENUE_MANAGER = "venue_manager"
    ADMIN = "admin"


class EventStatus(str, Enum):
    PLANNING = "planning"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class VendorCategory(str, Enum):
    CATERING = "catering"
    DECORATION = "decoration"
    PHOTOGRAPHY = "photography"
    VIDEOGRAPHY = "videography"
    ENTERTAINMENT = "entertainment"
    CULTURAL_PERFORMERS = "cultural_performers"
    FLORIST = "florist"
    MAKEUP_ARTIST = "makeup_artist"
    TRANSPORTATION = "transportation"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BookingStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class InquiryStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    RESPONDED = "responded"


class ViewState(str, Enum):
    LOADING = "loading"
    AUTHORIZED_EMPTY = "authorized_empty"
    AUTHORIZED_POPULATED = "authorized_populated"
    MUTATING = "mutating"
    RELOADED = "reloaded"
    UNAUTHORIZED = "unauthorized"
    REDIRECTED = "redirected"


class Identity(BaseModel):
    """The signed-in account as reported by the auth provider."""
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None


class Notice(BaseModel):
    """A user-visible notification (what the browser showed as a toast)."""
    level: str  # "success" | "error" | "info"
    message: str


class ScreenView(BaseModel):
    """JSON rendition of one screen."""
    screen: str
    state: ViewState
    data: Dict[str, Any] = {}
    notices: List[Notice] = []
    redirect_to: Optional[str] = None
    form: Optional[Dict[str, Any]] = Field(default=None, description="Submitted values echoed back after a failed write")
