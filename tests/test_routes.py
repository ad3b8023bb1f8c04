from fastapi.testclient import TestClient

from api.app import create_app
from fakes import ADMIN, COUPLE, MANAGER, VENDOR, FakeDataClient

VENDORS = [
    {"id": "vd1", "business_name": "Snap Studio", "category": "photography", "approval_status": "approved", "rating": 4.5},
    {"id": "vd2", "business_name": "Feast Co", "category": "catering", "approval_status": "approved", "rating": 4.9},
    {"id": "vd3", "business_name": "Hidden", "category": "catering", "approval_status": "pending", "rating": 5.0},
]


def test_unauthenticated_user_is_redirected_to_auth(make_client):
    client, _ = make_client()
    response = client.get("/dashboard")
    assert response.status_code == 401
    assert response.headers["location"] == "/auth"
    assert response.json()["state"] == "redirected"


def test_wrong_role_is_redirected_home_without_loading_content(make_client):
    client, data_client = make_client(identity=VENDOR)
    response = client.get("/admin")
    assert response.status_code == 403
    assert response.headers["location"] == "/vendor-dashboard"
    assert response.json()["notices"][0]["message"] == "Access denied"
    assert data_client.calls_for("select", "profiles") == []


def test_guard_is_pending_before_session_initializes(local_store):
    app = create_app(data_client=FakeDataClient(identity=COUPLE), local_store=local_store)
    # No startup: the session store has not read the session yet.
    client = TestClient(app)
    response = client.get("/events")
    assert response.status_code == 202
    assert response.json()["state"] == "loading"


def test_landing_page_is_public(make_client):
    client, _ = make_client()
    response = client.get("/")
    assert response.status_code == 200
    titles = [f["title"] for f in response.json()["data"]["features"]]
    assert titles[0] == "Event Planning" and len(titles) == 6


def test_unknown_route_renders_not_found_view(make_client):
    client, _ = make_client()
    response = client.get("/no-such-page")
    assert response.status_code == 404
    assert response.json()["notices"][0]["message"] == "Page not found"


def test_vendor_directory_lists_only_approved_vendors(make_client):
    client, _ = make_client(tables={"vendors": VENDORS, "events": []}, identity=COUPLE)
    response = client.get("/vendors", params={"category": "catering"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert [v["id"] for v in data["vendors"]] == ["vd2", "vd1"]
    assert [v["id"] for v in data["filtered_vendors"]] == ["vd2"]


def test_send_inquiry_creates_pending_row(make_client):
    client, data_client = make_client(tables={"vendors": VENDORS, "events": []}, identity=COUPLE)
    response = client.post("/vendors/inquiries", json={"vendor_id": "vd1", "event_id": "e1", "message": "Free in May?"})
    assert response.status_code == 200
    inquiry = data_client.tables["vendor_inquiries"][0]
    assert inquiry["status"] == "pending"
    assert inquiry["inquirer_id"] == COUPLE.id
    assert response.json()["notices"][-1]["message"] == "Inquiry sent successfully!"


def test_create_event_requires_title(make_client):
    client, data_client = make_client(tables={"events": []}, identity=COUPLE)
    response = client.post("/events/create", json={"title": "  ", "event_date": "2026-12-12"})
    assert response.status_code == 422
    assert data_client.calls_for("insert") == []


def test_create_event_redirects_to_events(make_client):
    client, data_client = make_client(tables={"events": []}, identity=COUPLE)
    response = client.post("/events/create", json={"title": "Our Wedding", "event_date": "2026-12-12", "budget": 25000})
    assert response.status_code == 200
    body = response.json()
    assert body["redirect_to"] == "/events"
    assert [e["title"] for e in body["data"]["events"]] == ["Our Wedding"]


def test_admin_reject_without_reason_is_blocked(make_client):
    tables = {"vendors": [{"id": "vd3", "approval_status": "pending"}]}
    client, data_client = make_client(tables=tables, identity=ADMIN)

    response = client.patch("/admin/vendors/vd3/approval", json={"status": "rejected", "rejection_reason": ""})
    assert response.status_code == 422
    assert response.json() == {"detail": "Please provide a rejection reason", "field": "rejection_reason"}
    assert data_client.calls_for("update") == []

    response = client.patch("/admin/vendors/vd3/approval", json={"status": "rejected", "rejection_reason": "No portfolio"})
    assert response.status_code == 200
    vendor = response.json()["data"]["vendors"][0]
    assert vendor["approval_status"] == "rejected"
    assert vendor["rejection_reason"] == "No portfolio"


def test_admin_can_add_and_remove_roles(make_client):
    client, data_client = make_client(tables={"profiles": [{"id": COUPLE.id, "email": COUPLE.email}]}, identity=ADMIN)

    response = client.post("/admin/roles", json={"user_id": COUPLE.id, "role": "planner", "action": "add"})
    assert response.status_code == 200
    assert response.json()["data"]["users"][0]["roles"] == ["couple", "planner"]

    response = client.post("/admin/roles", json={"user_id": COUPLE.id, "role": "planner", "action": "remove"})
    assert response.json()["data"]["users"][0]["roles"] == ["couple"]

    response = client.post("/admin/roles", json={"user_id": COUPLE.id, "role": "superuser", "action": "add"})
    assert response.status_code == 422


def test_venue_manager_add_venue_splits_amenities(make_client):
    client, data_client = make_client(tables={"venues": [], "booking_requests": []}, identity=MANAGER)
    response = client.post("/venue-manager/venues", json={
        "name": "Rose Hall", "location": "Pune", "capacity": 150, "amenities": "Parking, Garden, ",
    })
    assert response.status_code == 200
    venue = data_client.tables["venues"][0]
    assert venue["amenities"] == ["Parking", "Garden"]
    assert venue["manager_id"] == MANAGER.id
    assert response.json()["data"]["selected_venue_id"] == venue["id"]


def test_budget_screen_round_trip(make_client):
    client, _ = make_client(identity=COUPLE)

    response = client.get("/budget")
    assert response.status_code == 200
    budget = response.json()["data"]["budget"]
    assert budget["remaining"] == 12700
    assert budget["percentUsed"] == 78.8

    response = client.delete("/budget/categories/8")
    assert [c["id"] for c in response.json()["data"]["budget"]["categories"]] == [1, 2, 3, 4, 5, 6, 7]

    assert client.delete("/budget/categories/8").status_code == 404
    assert client.put("/budget/total", json={"totalBudget": 0}).status_code == 422

    export = client.get("/budget/export")
    assert export.headers["content-disposition"].startswith('attachment; filename="budget-tracker-')
    assert len(export.json()["categories"]) == 7

    response = client.post("/budget/reset")
    assert len(response.json()["data"]["budget"]["categories"]) == 8


def test_sign_in_and_out_drive_the_session(make_client):
    client, data_client = make_client()
    data_client.users[ADMIN.email] = ("secret", ADMIN)

    assert client.post("/auth/sign-in", json={"email": ADMIN.email, "password": "wrong"}).status_code == 401

    response = client.post("/auth/sign-in", json={"email": ADMIN.email, "password": "secret"})
    assert response.status_code == 200
    assert response.json()["redirect_to"] == "/admin"
    assert client.get("/admin").status_code == 200

    response = client.post("/auth/sign-out")
    assert response.json()["identity"] is None
    assert client.get("/admin").status_code == 401


def test_sign_up_assigns_initial_role(make_client):
    client, data_client = make_client()
    response = client.post("/auth/sign-up", json={
        "email": "new@example.com", "password": "secret1", "full_name": "New Vendor", "role": "vendor",
    })
    assert response.status_code == 201
    assert response.json()["redirect_to"] == "/vendor-dashboard"
    new_id = response.json()["identity"]["id"]
    assert {"user_id": new_id, "role": "vendor"}.items() <= data_client.tables["user_roles"][-1].items()


def test_health(make_client):
    client, _ = make_client(identity=COUPLE)
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert set(body["checks"]) == {"application", "supabase", "local_store", "session"}
