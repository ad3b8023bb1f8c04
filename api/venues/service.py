from api.events.service import load_my_events
from api.venues.models import BookingRequestCreate
from iwems.aggregates import CAPACITY_BUCKETS, filter_venues
from iwems.loaders import BookingLoader, VenueLoader
from iwems.screens import ScreenController


class VenueDirectoryScreen(ScreenController):
    screen = "/venues"
    primary_sections = ("venues",)
    load_errors = {"venues": "Failed to load venues", "events": "Failed to load events"}

    def __init__(self, session_store, data_client, decision=None, search: str = "", capacity: str = "all"):
        super().__init__(session_store, data_client, decision)
        self.search = search
        self.capacity = capacity

    def loaders(self):
        roles = self.decision.roles if self.decision else set()
        return {
            "venues": VenueLoader(self.data_client).approved,
            "events": lambda: load_my_events(self.data_client, self.user_id, roles),
        }

    def after_load(self) -> None:
        self.data["filtered_venues"] = filter_venues(self.data.get("venues", []), self.search, self.capacity)

    def view_data(self):
        return {
            **self.data,
            "filters": {"search": self.search, "capacity": self.capacity},
            "capacity_buckets": CAPACITY_BUCKETS,
        }

    async def request_booking(self, form: BookingRequestCreate) -> bool:
        return await self.mutate(
            lambda: BookingLoader(self.data_client).create(form.to_record(self.user_id)),
            success_message="Booking request sent!",
            failure_message="Failed to send booking request",
            form=form.model_dump(mode="json"),
        )
