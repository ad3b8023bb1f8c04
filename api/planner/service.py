from iwems.aggregates import planner_stats
from iwems.loaders import BookingLoader, EventLoader, InquiryLoader
from iwems.screens import ScreenController


class PlannerScreen(ScreenController):
    """Events assigned to the planner plus the bookings and inquiries raised for them."""

    screen = "/planner"
    primary_sections = ("events",)
    load_errors = {
        "events": "Failed to load events",
        "booking_requests": "Failed to load booking requests",
        "vendor_inquiries": "Failed to load vendor inquiries",
    }

    async def before_load(self):
        return {"events": await EventLoader(self.data_client).for_planner(self.user_id)}

    def loaders(self):
        event_ids = [e.get("id") for e in self.data.get("events", [])]
        return {
            "booking_requests": lambda: BookingLoader(self.data_client).for_events(event_ids),
            "vendor_inquiries": lambda: InquiryLoader(self.data_client).for_events(event_ids),
        }

    def after_load(self) -> None:
        self.data["stats"] = planner_stats(self.data.get("events", []))
