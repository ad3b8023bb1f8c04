from datetime import date
from typing import Optional

from api.venue_manager.models import VenueCreate
from iwems.aggregates import is_date_available, unavailable_dates
from iwems.exceptions import ValidationFailed
from iwems.loaders import EMPTY_RESULT, AvailabilityLoader, BookingLoader, VenueLoader
from iwems.models import BookingStatus
from iwems.screens import ScreenController


class VenueManagerScreen(ScreenController):
    """The manager's venues, booking requests against them and a date calendar.

    The calendar shows the venue picked with ``venue_id``, or the first venue
    when none is picked.
    """

    screen = "/venue-manager"
    primary_sections = ("venues", "bookings")
    load_errors = {
        "venues": "Failed to fetch venues",
        "bookings": "Failed to fetch booking requests",
        "availability": "Failed to fetch availability",
    }

    def __init__(self, session_store, data_client, decision=None, venue_id: Optional[str] = None):
        super().__init__(session_store, data_client, decision)
        self.requested_venue_id = venue_id

    @property
    def selected_venue_id(self) -> Optional[str]:
        venues = self.data.get("venues") or []
        ids = [v.get("id") for v in venues]
        if self.requested_venue_id in ids:
            return self.requested_venue_id
        return ids[0] if ids else None

    async def before_load(self):
        return {"venues": await VenueLoader(self.data_client).for_manager(self.user_id)}

    async def _load_availability(self):
        venue_id = self.selected_venue_id
        if venue_id is None:
            return dict(EMPTY_RESULT)
        return await AvailabilityLoader(self.data_client).unavailable_for(venue_id)

    def loaders(self):
        return {
            "bookings": lambda: BookingLoader(self.data_client).for_manager(self.user_id),
            "availability": self._load_availability,
        }

    def after_load(self) -> None:
        self.data["unavailable_dates"] = unavailable_dates(self.data.get("availability", []))

    def view_data(self):
        return {**self.data, "selected_venue_id": self.selected_venue_id}

    async def add_venue(self, form: VenueCreate) -> bool:
        return await self.mutate(
            lambda: VenueLoader(self.data_client).create(form.to_record(self.user_id)),
            success_message="Venue added successfully!",
            failure_message="Failed to add venue",
            form=form.model_dump(),
        )

    async def update_booking(self, request_id: str, status: BookingStatus) -> bool:
        status = BookingStatus(status)
        return await self.mutate(
            lambda: BookingLoader(self.data_client).set_status(request_id, status),
            success_message=f"Booking {status.value}!",
            failure_message="Failed to update booking request",
        )

    async def toggle_date(self, venue_id: str, day: date) -> bool:
        """Flip one date of the selected venue between available and unavailable."""
        if venue_id != self.selected_venue_id:
            raise ValidationFailed("venue_id", "Please select one of your venues")
        if "availability" in self.failed_sections:
            # Without the current entries a toggle could add a second row for the date.
            self.notify("error", "Availability could not be loaded, reload before changing dates")
            return False
        loader = AvailabilityLoader(self.data_client)

        if is_date_available(self.data.get("availability", []), day):
            operation = lambda: loader.mark_unavailable(venue_id, day)
            message = "Date marked as unavailable"
        else:
            operation = lambda: loader.mark_available(venue_id, day)
            message = "Date marked as available"
        return await self.mutate(operation, message, "Failed to update availability")
