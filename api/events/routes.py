from fastapi import APIRouter, Depends
import logging

from api.events.models import EventCreate, EventStatusUpdate
from api.events.service import CreateEventScreen, DashboardScreen, EventsScreen
from api.security import denied_response, get_data_client, get_session_store, render_screen, require_route
from iwems.models import ScreenView

events_router = APIRouter()


@events_router.get("/dashboard", response_model=ScreenView)
async def dashboard(
    decision=Depends(require_route("/dashboard")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response("/dashboard", decision)
    return await render_screen(DashboardScreen(session_store, data_client, decision))


@events_router.get("/events", response_model=ScreenView)
async def list_events(
    decision=Depends(require_route("/events")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response("/events", decision)
    return await render_screen(EventsScreen(session_store, data_client, decision))


@events_router.patch("/events/{event_id}/status", response_model=ScreenView)
async def update_event_status(
    event_id: str,
    body: EventStatusUpdate,
    decision=Depends(require_route("/events")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response("/events", decision)
    logging.info(f"Received status change for event {event_id}: {body.status.value}")
    screen = EventsScreen(session_store, data_client, decision)
    return await render_screen(screen, lambda: screen.change_status(event_id, body.status))


@events_router.get("/events/create", response_model=ScreenView)
async def create_event_form(
    decision=Depends(require_route("/events/create")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response("/events/create", decision)
    return await render_screen(CreateEventScreen(session_store, data_client, decision))


@events_router.post("/events/create", response_model=ScreenView)
async def create_event(
    body: EventCreate,
    decision=Depends(require_route("/events/create")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response("/events/create", decision)
    logging.info(f"Received create event request: {body.model_dump_json()}")
    screen = CreateEventScreen(session_store, data_client, decision)
    return await render_screen(screen, lambda: screen.create(body))
