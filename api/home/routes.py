from fastapi import APIRouter

from iwems.models import ScreenView, ViewState

home_router = APIRouter()

FEATURES = [
    {"title": "Event Planning", "description": "Organize every detail with intelligent task management and automated reminders"},
    {"title": "Vendor Directory", "description": "Browse and book top-rated vendors with transparent pricing and reviews"},
    {"title": "Venue Discovery", "description": "Find your perfect venue with detailed filters and availability tracking"},
    {"title": "Cultural Integration", "description": "Celebrate your heritage with curated cultural performances and exhibitions"},
    {"title": "Secure Payments", "description": "Safe and transparent payment processing for all bookings"},
    {"title": "Budget Analytics", "description": "Track expenses and stay on budget with real-time insights"},
]

USER_TYPES = [
    {
        "title": "For Couples",
        "description": "Plan your dream wedding with tools designed for you",
        "benefits": ["Event timeline management", "Guest list tracking", "Budget planning"],
    },
    {
        "title": "For Planners",
        "description": "Manage multiple events effortlessly",
        "benefits": ["Multi-event dashboard", "Client collaboration", "Vendor coordination"],
    },
    {
        "title": "For Vendors",
        "description": "Grow your wedding business",
        "benefits": ["Profile showcase", "Booking management", "Client reviews"],
    },
    {
        "title": "For Venue Managers",
        "description": "Maximize your venue bookings",
        "benefits": ["Availability calendar", "Pricing control", "Photo galleries"],
    },
]


@home_router.get("/", response_model=ScreenView)
async def landing_page():
    return ScreenView(
        screen="/",
        state=ViewState.AUTHORIZED_POPULATED,
        data={"features": FEATURES, "user_types": USER_TYPES},
    )
