from fastapi import APIRouter, Depends, Query
import logging

from api.security import denied_response, get_data_client, get_session_store, render_screen, require_route
from api.venues.models import BookingRequestCreate
from api.venues.service import VenueDirectoryScreen
from iwems.aggregates import CAPACITY_BUCKETS
from iwems.models import ScreenView

venues_router = APIRouter()

CAPACITY_PATTERN = "^(" + "|".join(CAPACITY_BUCKETS) + ")$"


@venues_router.get("", response_model=ScreenView)
async def venue_directory(
    search: str = Query("", description="Matches name, description or location"),
    capacity: str = Query("all", pattern=CAPACITY_PATTERN),
    decision=Depends(require_route("/venues")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response("/venues", decision)
    screen = VenueDirectoryScreen(session_store, data_client, decision, search=search, capacity=capacity)
    return await render_screen(screen)


@venues_router.post("/bookings", response_model=ScreenView)
async def request_booking(
    body: BookingRequestCreate,
    decision=Depends(require_route("/venues")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response("/venues", decision)
    logging.info(f"Received booking request for venue {body.venue_id} on {body.request_date}")
    screen = VenueDirectoryScreen(session_store, data_client, decision)
    return await render_screen(screen, lambda: screen.request_booking(body))
