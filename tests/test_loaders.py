from datetime import date

import pytest

from fakes import FakeDataClient
from iwems.exceptions import ValidationFailed
from iwems.loaders import (
    AvailabilityLoader,
    BookingLoader,
    EventLoader,
    InquiryLoader,
    VendorLoader,
    VenueLoader,
    approval_values,
)
from iwems.models import ApprovalStatus


@pytest.mark.asyncio
async def test_events_are_scoped_to_owner_and_ordered_by_date():
    client = FakeDataClient(tables={"events": [
        {"id": "e1", "couple_id": "me", "event_date": "2026-06-01"},
        {"id": "e2", "couple_id": "other", "event_date": "2026-01-01"},
        {"id": "e3", "couple_id": "me", "event_date": "2026-02-14"},
    ]})
    result = await EventLoader(client).for_couple("me")
    assert [e["id"] for e in result["data"]] == ["e3", "e1"]


@pytest.mark.asyncio
async def test_approved_venues_by_rating_with_nulls_last():
    client = FakeDataClient(tables={"venues": [
        {"id": "v1", "approval_status": "approved", "rating": None},
        {"id": "v2", "approval_status": "approved", "rating": 4.9},
        {"id": "v3", "approval_status": "pending", "rating": 5.0},
        {"id": "v4", "approval_status": "approved", "rating": 3.2},
    ]})
    result = await VenueLoader(client).approved()
    assert [v["id"] for v in result["data"]] == ["v2", "v4", "v1"]


@pytest.mark.asyncio
async def test_load_failure_is_returned_not_raised():
    client = FakeDataClient()
    client.fail_on("select", "vendors")
    result = await VendorLoader(client).approved()
    assert result["status"] == "error"


@pytest.mark.asyncio
async def test_empty_membership_filter_skips_the_query():
    client = FakeDataClient()
    result = await BookingLoader(client).for_events([])
    assert result == {"status": "success", "data": []}
    assert client.calls == []


@pytest.mark.asyncio
async def test_bookings_for_manager_filter_through_joined_venue():
    client = FakeDataClient(tables={
        "venues": [{"id": "v1", "name": "Rose Hall", "manager_id": "m1"}, {"id": "v2", "name": "Other", "manager_id": "m2"}],
        "events": [{"id": "e1", "title": "Our Wedding"}],
        "booking_requests": [
            {"id": "b1", "venue_id": "v1", "event_id": "e1", "created_at": "2025-01-01"},
            {"id": "b2", "venue_id": "v2", "event_id": "e1", "created_at": "2025-01-02"},
        ],
    })
    result = await BookingLoader(client).for_manager("m1")
    assert [b["id"] for b in result["data"]] == ["b1"]
    assert result["data"][0]["venues"]["name"] == "Rose Hall"
    assert result["data"][0]["events"]["title"] == "Our Wedding"


@pytest.mark.asyncio
async def test_inquiries_for_events_use_membership_filter():
    client = FakeDataClient(tables={"vendor_inquiries": [
        {"id": "i1", "event_id": "e1", "created_at": "2025-01-01"},
        {"id": "i2", "event_id": "e9", "created_at": "2025-01-02"},
    ]})
    result = await InquiryLoader(client).for_events(["e1", "e2"])
    assert [i["id"] for i in result["data"]] == ["i1"]


def test_rejection_without_reason_is_blocked():
    with pytest.raises(ValidationFailed) as excinfo:
        approval_values(ApprovalStatus.REJECTED, "   ")
    assert excinfo.value.field == "rejection_reason"


def test_approval_clears_reason():
    assert approval_values(ApprovalStatus.APPROVED, "old reason") == {
        "approval_status": "approved",
        "rejection_reason": None,
    }


@pytest.mark.asyncio
async def test_rejecting_vendor_without_reason_never_calls_update():
    client = FakeDataClient(tables={"vendors": [{"id": "v1", "approval_status": "pending"}]})
    with pytest.raises(ValidationFailed):
        await VendorLoader(client).set_approval("v1", ApprovalStatus.REJECTED, "")
    assert client.calls_for("update") == []


@pytest.mark.asyncio
async def test_rejecting_vendor_with_reason_stores_it():
    client = FakeDataClient(tables={"vendors": [{"id": "v1", "approval_status": "pending"}]})
    result = await VendorLoader(client).set_approval("v1", ApprovalStatus.REJECTED, "Incomplete portfolio")
    assert result["status"] == "success"
    assert client.tables["vendors"][0]["approval_status"] == "rejected"
    assert client.tables["vendors"][0]["rejection_reason"] == "Incomplete portfolio"


@pytest.mark.asyncio
async def test_availability_entries_are_created_and_deleted():
    client = FakeDataClient()
    loader = AvailabilityLoader(client)
    day = date(2026, 5, 16)

    await loader.mark_unavailable("v1", day)
    unavailable = await loader.unavailable_for("v1")
    assert [e["date"] for e in unavailable["data"]] == ["2026-05-16"]

    await loader.mark_available("v1", day)
    unavailable = await loader.unavailable_for("v1")
    assert unavailable["data"] == []
