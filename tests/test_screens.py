import asyncio
from datetime import date

import pytest

from api.admin.service import AdminScreen
from api.events.models import EventCreate
from api.events.service import CreateEventScreen, DashboardScreen, EventsScreen
from api.planner.service import PlannerScreen
from api.vendor_dashboard.service import VendorDashboardScreen, storage_path_from_url
from api.venue_manager.service import VenueManagerScreen
from fakes import ADMIN, COUPLE, MANAGER, PLANNER, VENDOR, FakeDataClient, signed_in_store
from iwems.exceptions import ValidationFailed
from iwems.models import ApprovalStatus, Role, ViewState
from iwems.roles import AccessDecision, AccessOutcome
from iwems.screens import ScreenController


def allow(*roles):
    return AccessDecision(outcome=AccessOutcome.ALLOW, roles=set(roles))


class GatedDataClient(FakeDataClient):
    """Holds selects on one table until the gate opens."""

    def __init__(self, *args, gated_table=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.gate = asyncio.Event()
        self.gated_table = gated_table

    async def select(self, table, *args, **kwargs):
        if table == self.gated_table:
            await self.gate.wait()
        return await super().select(table, *args, **kwargs)


class SlowScreen(ScreenController):
    screen = "/slow"

    def __init__(self, *args, gate=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.gate = gate

    def loaders(self):
        async def _rows():
            await self.gate.wait()
            return {"status": "success", "data": [{"id": 1}]}
        return {"rows": _rows}


@pytest.mark.asyncio
async def test_results_of_an_unmounted_screen_are_dropped():
    gate = asyncio.Event()
    screen = SlowScreen(signed_in_store(COUPLE), FakeDataClient(), gate=gate)

    mounting = asyncio.create_task(screen.mount())
    await asyncio.sleep(0)
    screen.unmount()
    gate.set()
    view = await mounting

    assert view.state == ViewState.LOADING
    assert "rows" not in view.data


@pytest.mark.asyncio
async def test_identity_change_unmounts_the_screen():
    store = signed_in_store(COUPLE)
    gate = asyncio.Event()
    screen = SlowScreen(store, FakeDataClient(), gate=gate)

    mounting = asyncio.create_task(screen.mount())
    await asyncio.sleep(0)
    store.handle_auth_event("SIGNED_OUT", None)
    gate.set()
    view = await mounting

    assert "rows" not in view.data


@pytest.mark.asyncio
async def test_dashboard_branches_on_row_count():
    client = FakeDataClient(tables={"events": []})
    view = await DashboardScreen(signed_in_store(COUPLE), client, allow(Role.COUPLE)).mount()
    assert view.state == ViewState.AUTHORIZED_EMPTY
    assert view.data["stats"]["totalEvents"] == 0

    client.tables["events"].append({"id": "e1", "couple_id": COUPLE.id, "event_date": "2030-01-01", "budget": 500})
    view = await DashboardScreen(signed_in_store(COUPLE), client, allow(Role.COUPLE)).mount()
    assert view.state == ViewState.AUTHORIZED_POPULATED
    assert view.data["stats"]["totalBudget"] == 500


@pytest.mark.asyncio
async def test_failed_reload_keeps_previous_data():
    client = FakeDataClient(tables={"events": [{"id": "e1", "couple_id": COUPLE.id, "event_date": "2030-01-01"}]})
    screen = DashboardScreen(signed_in_store(COUPLE), client, allow(Role.COUPLE))
    await screen.mount()

    client.fail_on("select", "events")
    await screen.reload()

    assert [e["id"] for e in screen.data["events"]] == ["e1"]
    assert screen.notices[-1].message == "Failed to load events"


@pytest.mark.asyncio
async def test_failed_create_echoes_form_and_restores_state():
    client = FakeDataClient(tables={"events": []})
    client.fail_on("insert", "events")
    screen = CreateEventScreen(signed_in_store(COUPLE), client, allow(Role.COUPLE))
    await screen.mount()

    ok = await screen.create(EventCreate(title="Our Wedding", event_date=date(2026, 12, 12)))

    assert not ok
    assert screen.state == ViewState.AUTHORIZED_EMPTY
    assert screen.form["title"] == "Our Wedding"
    assert screen.redirect_to is None


@pytest.mark.asyncio
async def test_create_event_fills_defaults_and_redirects():
    client = FakeDataClient(tables={"events": []})
    screen = CreateEventScreen(signed_in_store(COUPLE), client, allow(Role.COUPLE))
    await screen.mount()

    ok = await screen.create(EventCreate(title="  Our Wedding ", event_date=date(2026, 12, 12)))

    assert ok
    record = client.tables["events"][0]
    assert record["title"] == "Our Wedding"
    assert record["status"] == "planning"
    assert record["couple_id"] == COUPLE.id
    assert record["guest_count"] == 0
    assert record["budget"] is None
    assert screen.redirect_to == "/events"
    assert screen.state == ViewState.RELOADED


@pytest.mark.asyncio
async def test_admin_rejection_flow():
    client = FakeDataClient(tables={
        "profiles": [], "user_roles": [], "events": [], "venues": [], "booking_requests": [],
        "vendors": [{"id": "v1", "business_name": "Snap", "approval_status": "pending", "created_at": "2025-01-01"}],
    })
    screen = AdminScreen(signed_in_store(ADMIN), client, allow(Role.ADMIN))
    await screen.mount()
    assert screen.data["analytics"]["pendingVendors"] == 1

    with pytest.raises(ValidationFailed):
        await screen.review_vendor("v1", ApprovalStatus.REJECTED, "")
    assert client.calls_for("update") == []

    assert await screen.review_vendor("v1", ApprovalStatus.REJECTED, "Blurry photos")
    vendor = screen.data["vendors"][0]
    assert vendor["approval_status"] == "rejected"
    assert vendor["rejection_reason"] == "Blurry photos"
    assert screen.data["analytics"]["pendingVendors"] == 0


@pytest.mark.asyncio
async def test_planner_sees_bookings_and_inquiries_for_own_events():
    client = FakeDataClient(tables={
        "events": [
            {"id": "e1", "planner_id": PLANNER.id, "couple_id": "c1", "event_date": "2026-01-01", "status": "planning", "budget": 100},
            {"id": "e2", "planner_id": "someone-else", "couple_id": "c2", "event_date": "2026-02-01"},
        ],
        "booking_requests": [{"id": "b1", "event_id": "e1"}, {"id": "b2", "event_id": "e2"}],
        "vendor_inquiries": [{"id": "i1", "event_id": "e1"}],
    })
    view = await PlannerScreen(signed_in_store(PLANNER), client, allow(Role.PLANNER)).mount()
    assert [b["id"] for b in view.data["booking_requests"]] == ["b1"]
    assert [i["id"] for i in view.data["vendor_inquiries"]] == ["i1"]
    assert view.data["stats"] == {"totalEvents": 1, "activeEvents": 1, "totalClients": 1, "totalBudget": 100}


@pytest.mark.asyncio
async def test_toggling_a_date_twice_restores_availability():
    client = FakeDataClient(tables={
        "venues": [{"id": "v1", "manager_id": MANAGER.id, "name": "Rose Hall", "created_at": "2025-01-01"}],
        "venue_availability": [{"id": "a1", "venue_id": "v1", "date": "2026-03-01", "is_available": False}],
        "booking_requests": [],
    })
    screen = VenueManagerScreen(signed_in_store(MANAGER), client, allow(Role.VENUE_MANAGER))
    await screen.mount()
    before = list(screen.data["unavailable_dates"])

    await screen.toggle_date("v1", date(2026, 5, 16))
    assert "2026-05-16" in screen.data["unavailable_dates"]
    await screen.toggle_date("v1", date(2026, 5, 16))

    assert screen.data["unavailable_dates"] == before


@pytest.mark.asyncio
async def test_toggle_rejects_venue_of_another_manager():
    client = FakeDataClient(tables={
        "venues": [
            {"id": "v1", "manager_id": MANAGER.id, "name": "Mine"},
            {"id": "v2", "manager_id": "other", "name": "Theirs"},
        ],
    })
    screen = VenueManagerScreen(signed_in_store(MANAGER), client, allow(Role.VENUE_MANAGER), venue_id="v2")
    await screen.mount()
    assert screen.selected_venue_id == "v1"
    with pytest.raises(ValidationFailed):
        await screen.toggle_date("v2", date(2026, 5, 16))


@pytest.mark.asyncio
async def test_portfolio_upload_and_removal():
    client = FakeDataClient(tables={
        "vendors": [{"id": "vd1", "user_id": VENDOR.id, "business_name": "Snap", "portfolio_images": []}],
        "vendor_inquiries": [],
    })
    screen = VendorDashboardScreen(signed_in_store(VENDOR), client, allow(Role.VENDOR))
    await screen.mount()

    assert await screen.upload_image("cake.png", b"\x89PNG", "image/png")
    images = screen.vendor["portfolio_images"]
    assert len(images) == 1
    path = storage_path_from_url(images[0])
    assert path.startswith(f"{VENDOR.id}/") and path.endswith(".png")
    assert path in client.storage["vendor-portfolios"]

    assert await screen.remove_image(images[0])
    assert screen.vendor["portfolio_images"] == []
    assert client.storage["vendor-portfolios"] == {}


@pytest.mark.asyncio
async def test_upload_without_profile_is_blocked():
    client = FakeDataClient(tables={"vendors": []})
    screen = VendorDashboardScreen(signed_in_store(VENDOR), client, allow(Role.VENDOR))
    await screen.mount()
    with pytest.raises(ValidationFailed):
        await screen.upload_image("cake.png", b"data", "image/png")
    assert client.calls_for("upload") == []


PLANNER_TABLES = {
    "events": [{"id": "e1", "planner_id": PLANNER.id, "couple_id": "c1", "event_date": "2026-01-01", "status": "planning"}],
    "booking_requests": [{"id": "b1", "event_id": "e1"}],
    "vendor_inquiries": [],
}


@pytest.mark.asyncio
async def test_sign_out_during_dependent_load_drops_it():
    store = signed_in_store(PLANNER)
    client = GatedDataClient(tables=PLANNER_TABLES, gated_table="events")
    screen = PlannerScreen(store, client, allow(Role.PLANNER))

    mounting = asyncio.create_task(screen.mount())
    await asyncio.sleep(0)
    store.handle_auth_event("SIGNED_OUT", None)
    client.gate.set()
    view = await mounting

    assert view.state == ViewState.LOADING
    assert "events" not in view.data


@pytest.mark.asyncio
async def test_sign_out_during_section_loads_rolls_back_dependent_data():
    store = signed_in_store(PLANNER)
    client = GatedDataClient(tables=PLANNER_TABLES, gated_table="booking_requests")
    screen = PlannerScreen(store, client, allow(Role.PLANNER))

    mounting = asyncio.create_task(screen.mount())
    await asyncio.sleep(0)
    store.handle_auth_event("SIGNED_OUT", None)
    client.gate.set()
    view = await mounting

    assert view.state == ViewState.LOADING
    assert view.data == {}


@pytest.mark.asyncio
async def test_planner_lists_the_event_they_created():
    client = FakeDataClient(tables={"events": []})
    screen = CreateEventScreen(signed_in_store(PLANNER), client, allow(Role.PLANNER))
    await screen.mount()

    assert await screen.create(EventCreate(title="Client Wedding", event_date=date(2026, 9, 19)))
    assert [e["title"] for e in screen.data["events"]] == ["Client Wedding"]

    view = await EventsScreen(signed_in_store(PLANNER), client, allow(Role.PLANNER)).mount()
    assert [e["title"] for e in view.data["events"]] == ["Client Wedding"]


@pytest.mark.asyncio
async def test_toggle_is_refused_when_availability_failed_to_load():
    client = FakeDataClient(tables={
        "venues": [{"id": "v1", "manager_id": MANAGER.id, "name": "Rose Hall"}],
        "venue_availability": [{"id": "a1", "venue_id": "v1", "date": "2026-05-16", "is_available": False}],
        "booking_requests": [],
    })
    client.fail_on("select", "venue_availability")
    screen = VenueManagerScreen(signed_in_store(MANAGER), client, allow(Role.VENUE_MANAGER))
    await screen.mount()
    assert "availability" in screen.failed_sections

    assert not await screen.toggle_date("v1", date(2026, 5, 16))

    assert client.calls_for("insert", "venue_availability") == []
    assert client.calls_for("delete", "venue_availability") == []
    assert len([r for r in client.tables["venue_availability"] if r["date"] == "2026-05-16"]) == 1
    assert screen.notices[-1].level == "error"


@pytest.mark.asyncio
async def test_removing_an_image_outside_the_portfolio_is_blocked():
    kept = "https://example.supabase.co/storage/v1/object/public/vendor-portfolios/user-vendor/1.png"
    client = FakeDataClient(tables={
        "vendors": [{"id": "vd1", "user_id": VENDOR.id, "business_name": "Snap", "portfolio_images": [kept]}],
        "vendor_inquiries": [],
    })
    screen = VendorDashboardScreen(signed_in_store(VENDOR), client, allow(Role.VENDOR))
    await screen.mount()

    with pytest.raises(ValidationFailed):
        await screen.remove_image("https://example.supabase.co/storage/v1/object/public/vendor-portfolios/other-user/2.png")

    assert client.calls_for("update") == []
    assert client.calls_for("remove") == []
    assert screen.vendor["portfolio_images"] == [kept]
