from fastapi import APIRouter, Depends
import logging

from api.admin.models import ApprovalUpdate, RoleChange
from api.admin.service import AdminScreen
from api.security import denied_response, get_data_client, get_session_store, render_screen, require_route
from iwems.models import ScreenView

admin_router = APIRouter()


@admin_router.get("", response_model=ScreenView)
async def admin_dashboard(
    decision=Depends(require_route("/admin")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response("/admin", decision)
    return await render_screen(AdminScreen(session_store, data_client, decision))


@admin_router.patch("/vendors/{vendor_id}/approval", response_model=ScreenView)
async def review_vendor(
    vendor_id: str,
    body: ApprovalUpdate,
    decision=Depends(require_route("/admin")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response("/admin", decision)
    logging.info(f"Received vendor review for {vendor_id}: {body.status.value}")
    screen = AdminScreen(session_store, data_client, decision)
    return await render_screen(screen, lambda: screen.review_vendor(vendor_id, body.status, body.rejection_reason))


@admin_router.patch("/venues/{venue_id}/approval", response_model=ScreenView)
async def review_venue(
    venue_id: str,
    body: ApprovalUpdate,
    decision=Depends(require_route("/admin")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response("/admin", decision)
    logging.info(f"Received venue review for {venue_id}: {body.status.value}")
    screen = AdminScreen(session_store, data_client, decision)
    return await render_screen(screen, lambda: screen.review_venue(venue_id, body.status, body.rejection_reason))


@admin_router.post("/roles", response_model=ScreenView)
async def change_role(
    body: RoleChange,
    decision=Depends(require_route("/admin")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response("/admin", decision)
    screen = AdminScreen(session_store, data_client, decision)
    return await render_screen(screen, lambda: screen.change_role(body.user_id, body.role, body.action))
