import asyncio
import logging
from typing import Optional

from iwems.aggregates import admin_analytics, users_with_roles
from iwems.loaders import (
    BookingLoader,
    EventLoader,
    ProfileLoader,
    RoleLoader,
    VendorLoader,
    VenueLoader,
    approval_values,
)
from iwems.models import ApprovalStatus, BookingStatus, Role
from iwems.screens import ScreenController


class AdminScreen(ScreenController):
    screen = "/admin"
    primary_sections = ("users", "vendors", "venues")
    load_errors = {
        "profiles": "Failed to fetch users",
        "role_assignments": "Failed to fetch user roles",
        "vendors": "Failed to fetch vendors",
        "venues": "Failed to fetch venues",
        "counts": "Failed to fetch analytics",
    }

    async def _load_counts(self):
        count_calls = {
            "profiles": ProfileLoader(self.data_client).count(),
            "events": EventLoader(self.data_client).count(),
            "vendors": VendorLoader(self.data_client).count(),
            "venues": VenueLoader(self.data_client).count(),
            "pending_bookings": BookingLoader(self.data_client).count(status=BookingStatus.PENDING.value),
        }
        names = list(count_calls)
        results = await asyncio.gather(*count_calls.values())
        for result in results:
            if result.get("status") != "success":
                return result
        return {"status": "success", "data": {name: r.get("count") or 0 for name, r in zip(names, results)}}

    def loaders(self):
        return {
            "profiles": ProfileLoader(self.data_client).load_all,
            "role_assignments": RoleLoader(self.data_client).load_all,
            "vendors": VendorLoader(self.data_client).all_newest_first,
            "venues": VenueLoader(self.data_client).all_newest_first,
            "counts": self._load_counts,
        }

    def after_load(self) -> None:
        counts = self.data.get("counts")
        if not isinstance(counts, dict):
            counts = {}
        self.data["users"] = users_with_roles(self.data.get("profiles", []), self.data.get("role_assignments", []))
        self.data["analytics"] = admin_analytics(counts, self.data.get("vendors", []), self.data.get("venues", []))

    def view_data(self):
        data = {k: v for k, v in self.data.items() if k not in ("profiles", "role_assignments", "counts")}
        data["roles"] = [r.value for r in Role]
        return data

    async def review_vendor(self, vendor_id: str, status: ApprovalStatus, reason: Optional[str] = None) -> bool:
        status = ApprovalStatus(status)
        # Raises ValidationFailed before anything is sent when a rejection has no reason.
        approval_values(status, reason)
        return await self.mutate(
            lambda: VendorLoader(self.data_client).set_approval(vendor_id, status, reason),
            success_message=f"Vendor {status.value}",
            failure_message="Failed to update vendor status",
        )

    async def review_venue(self, venue_id: str, status: ApprovalStatus, reason: Optional[str] = None) -> bool:
        status = ApprovalStatus(status)
        approval_values(status, reason)
        return await self.mutate(
            lambda: VenueLoader(self.data_client).set_approval(venue_id, status, reason),
            success_message=f"Venue {status.value}",
            failure_message="Failed to update venue status",
        )

    async def change_role(self, user_id: str, role: Role, action: str) -> bool:
        role = Role(role)
        loader = RoleLoader(self.data_client)
        logging.info(f"AdminScreen: {action} role {role.value} for user {user_id}")
        if action == "add":
            return await self.mutate(lambda: loader.assign(user_id, role), "Role added", "Failed to add role")
        return await self.mutate(lambda: loader.revoke(user_id, role), "Role removed", "Failed to remove role")
