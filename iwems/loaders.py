"""Entity loaders: one load/create/update set per table, scoped by owner.

Loaders never raise on transport failures; they hand back the data client's
status dict and leave it to the screen to turn an error into a notice while
keeping whatever it loaded before.
"""
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from iwems.exceptions import ValidationFailed
from iwems.models import ApprovalStatus, BookingStatus, EventStatus, InquiryStatus, Role

EMPTY_RESULT = {"status": "success", "data": []}


class EntityLoader:
    table: str = ""
    order_by: Optional[str] = "created_at"
    ascending: bool = False

    def __init__(self, data_client):
        self.data_client = data_client

    async def load(
        self,
        columns: str = "*",
        *,
        eq: Optional[Dict[str, Any]] = None,
        in_: Optional[Dict[str, Iterable[Any]]] = None,
        order_by: Optional[str] = None,
        ascending: Optional[bool] = None,
        nulls_first: bool = False,
    ) -> Dict[str, Any]:
        if in_ and any(not list(values) for values in in_.values()):
            # Membership in an empty set matches nothing; skip the round trip.
            return dict(EMPTY_RESULT)
        result = await self.data_client.select(
            self.table,
            columns,
            eq=eq,
            in_=in_,
            order_by=order_by or self.order_by,
            ascending=self.ascending if ascending is None else ascending,
            nulls_first=nulls_first,
        )
        if result.get("status") != "success":
            logging.warning(f"{type(self).__name__}.load failed: {result.get('error')}")
        return result

    async def count(self, **eq) -> Dict[str, Any]:
        return await self.data_client.select(self.table, "*", eq=eq or None, count_only=True)

    async def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        result = await self.data_client.insert(self.table, [record])
        if result.get("status") != "success":
            logging.error(f"{type(self).__name__}.create failed: {result.get('error')}")
        return result

    async def update(self, row_id: str, values: Dict[str, Any]) -> Dict[str, Any]:
        result = await self.data_client.update(self.table, values, eq={"id": row_id})
        if result.get("status") != "success":
            logging.error(f"{type(self).__name__}.update({row_id}) failed: {result.get('error')}")
        return result

    async def delete_where(self, **eq) -> Dict[str, Any]:
        result = await self.data_client.delete(self.table, eq=eq)
        if result.get("status") != "success":
            logging.error(f"{type(self).__name__}.delete_where({eq}) failed: {result.get('error')}")
        return result


def approval_values(status: ApprovalStatus, reason: Optional[str]) -> Dict[str, Any]:
    """Field values for an approval transition.

    A rejection needs a non-empty reason; any other status clears the reason.
    """
    status = ApprovalStatus(status)
    if status == ApprovalStatus.REJECTED:
        if not reason or not reason.strip():
            raise ValidationFailed("rejection_reason", "Please provide a rejection reason")
        return {"approval_status": status.value, "rejection_reason": reason.strip()}
    return {"approval_status": status.value, "rejection_reason": None}


class ProfileLoader(EntityLoader):
    table = "profiles"

    async def load_all(self) -> Dict[str, Any]:
        return await self.load()


class RoleLoader(EntityLoader):
    table = "user_roles"
    order_by = None

    async def load_all(self) -> Dict[str, Any]:
        return await self.load()

    async def assign(self, user_id: str, role: Role) -> Dict[str, Any]:
        return await self.create({"user_id": user_id, "role": Role(role).value})

    async def revoke(self, user_id: str, role: Role) -> Dict[str, Any]:
        return await self.delete_where(user_id=user_id, role=Role(role).value)


class EventLoader(EntityLoader):
    table = "events"
    order_by = "event_date"
    ascending = True

    async def for_couple(self, user_id: str) -> Dict[str, Any]:
        return await self.load(eq={"couple_id": user_id})

    async def for_planner(self, user_id: str) -> Dict[str, Any]:
        return await self.load(eq={"planner_id": user_id})

    async def set_status(self, event_id: str, status: EventStatus) -> Dict[str, Any]:
        return await self.update(event_id, {"status": EventStatus(status).value})


class VendorLoader(EntityLoader):
    table = "vendors"

    async def approved(self) -> Dict[str, Any]:
        return await self.load(
            eq={"approval_status": ApprovalStatus.APPROVED.value},
            order_by="rating",
            ascending=False,
        )

    async def all_newest_first(self) -> Dict[str, Any]:
        return await self.load()

    async def for_owner(self, user_id: str) -> Dict[str, Any]:
        return await self.load(eq={"user_id": user_id})

    async def set_approval(self, vendor_id: str, status: ApprovalStatus, reason: Optional[str] = None) -> Dict[str, Any]:
        return await self.update(vendor_id, approval_values(status, reason))

    async def set_portfolio(self, vendor_id: str, images: List[str]) -> Dict[str, Any]:
        return await self.update(vendor_id, {"portfolio_images": images})


class VenueLoader(EntityLoader):
    table = "venues"

    async def approved(self) -> Dict[str, Any]:
        return await self.load(
            eq={"approval_status": ApprovalStatus.APPROVED.value},
            order_by="rating",
            ascending=False,
            nulls_first=False,
        )

    async def all_newest_first(self) -> Dict[str, Any]:
        return await self.load()

    async def for_manager(self, user_id: str) -> Dict[str, Any]:
        return await self.load(eq={"manager_id": user_id})

    async def set_approval(self, venue_id: str, status: ApprovalStatus, reason: Optional[str] = None) -> Dict[str, Any]:
        return await self.update(venue_id, approval_values(status, reason))


class AvailabilityLoader(EntityLoader):
    table = "venue_availability"
    order_by = "date"
    ascending = True

    async def unavailable_for(self, venue_id: str) -> Dict[str, Any]:
        return await self.load(eq={"venue_id": venue_id, "is_available": False})

    async def mark_unavailable(self, venue_id: str, day: date) -> Dict[str, Any]:
        return await self.create({"venue_id": venue_id, "date": day.isoformat(), "is_available": False})

    async def mark_available(self, venue_id: str, day: date) -> Dict[str, Any]:
        # No entry means available, so "available again" is a delete.
        return await self.delete_where(venue_id=venue_id, date=day.isoformat())


class BookingLoader(EntityLoader):
    table = "booking_requests"

    async def for_manager(self, manager_id: str) -> Dict[str, Any]:
        return await self.load(
            "*, venues!inner(name, manager_id), events(title)",
            eq={"venues.manager_id": manager_id},
        )

    async def for_events(self, event_ids: List[str]) -> Dict[str, Any]:
        return await self.load("*, venues(name), events(title)", in_={"event_id": event_ids})

    async def set_status(self, request_id: str, status: BookingStatus) -> Dict[str, Any]:
        return await self.update(request_id, {"status": BookingStatus(status).value})


class InquiryLoader(EntityLoader):
    table = "vendor_inquiries"

    async def for_vendor(self, vendor_id: str) -> Dict[str, Any]:
        return await self.load("*, events(title)", eq={"vendor_id": vendor_id})

    async def for_events(self, event_ids: List[str]) -> Dict[str, Any]:
        return await self.load("*, vendors(business_name, category), events(title)", in_={"event_id": event_ids})

    async def set_status(self, inquiry_id: str, status: InquiryStatus) -> Dict[str, Any]:
        return await self.update(inquiry_id, {"status": InquiryStatus(status).value})
