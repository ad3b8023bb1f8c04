from typing import Optional

from api.events.service import load_my_events
from api.vendors.models import InquiryCreate
from iwems.aggregates import filter_vendors
from iwems.loaders import InquiryLoader, VendorLoader
from iwems.models import VendorCategory
from iwems.screens import ScreenController


class VendorDirectoryScreen(ScreenController):
    """Approved vendors, best rated first, filtered by category and search text."""

    screen = "/vendors"
    primary_sections = ("vendors",)
    load_errors = {"vendors": "Failed to load vendors", "events": "Failed to load events"}

    def __init__(self, session_store, data_client, decision=None, search: str = "", category: Optional[str] = None):
        super().__init__(session_store, data_client, decision)
        self.search = search
        self.category = category

    def loaders(self):
        roles = self.decision.roles if self.decision else set()
        return {
            "vendors": VendorLoader(self.data_client).approved,
            "events": lambda: load_my_events(self.data_client, self.user_id, roles),
        }

    def after_load(self) -> None:
        self.data["filtered_vendors"] = filter_vendors(self.data.get("vendors", []), self.search, self.category)

    def view_data(self):
        return {
            **self.data,
            "filters": {"search": self.search, "category": self.category or "all"},
            "categories": [c.value for c in VendorCategory],
        }

    async def send_inquiry(self, form: InquiryCreate) -> bool:
        return await self.mutate(
            lambda: InquiryLoader(self.data_client).create(form.to_record(self.user_id)),
            success_message="Inquiry sent successfully!",
            failure_message="Failed to send inquiry",
            form=form.model_dump(),
        )
