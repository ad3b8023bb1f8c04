from fastapi import APIRouter, Depends
from typing import Optional
import logging

from api.security import denied_response, get_data_client, get_session_store, render_screen, require_route
from api.venue_manager.models import AvailabilityToggle, BookingStatusUpdate, VenueCreate
from api.venue_manager.service import VenueManagerScreen
from iwems.models import ScreenView

venue_manager_router = APIRouter()

ROUTE = "/venue-manager"


@venue_manager_router.get("", response_model=ScreenView)
async def venue_manager_dashboard(
    venue_id: Optional[str] = None,
    decision=Depends(require_route(ROUTE)),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response(ROUTE, decision)
    return await render_screen(VenueManagerScreen(session_store, data_client, decision, venue_id=venue_id))


@venue_manager_router.post("/venues", response_model=ScreenView)
async def add_venue(
    body: VenueCreate,
    decision=Depends(require_route(ROUTE)),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response(ROUTE, decision)
    logging.info(f"Received add venue request: {body.name} ({body.location})")
    screen = VenueManagerScreen(session_store, data_client, decision)
    return await render_screen(screen, lambda: screen.add_venue(body))


@venue_manager_router.patch("/bookings/{request_id}", response_model=ScreenView)
async def update_booking_status(
    request_id: str,
    body: BookingStatusUpdate,
    decision=Depends(require_route(ROUTE)),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response(ROUTE, decision)
    logging.info(f"Received booking status change for {request_id}: {body.status.value}")
    screen = VenueManagerScreen(session_store, data_client, decision)
    return await render_screen(screen, lambda: screen.update_booking(request_id, body.status))


@venue_manager_router.post("/availability/toggle", response_model=ScreenView)
async def toggle_availability(
    body: AvailabilityToggle,
    decision=Depends(require_route(ROUTE)),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response(ROUTE, decision)
    logging.info(f"Received availability toggle for venue {body.venue_id} on {body.day}")
    screen = VenueManagerScreen(session_store, data_client, decision, venue_id=body.venue_id)
    return await render_screen(screen, lambda: screen.toggle_date(body.venue_id, body.day))
