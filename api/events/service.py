import asyncio
import logging
from typing import Any, Dict, Iterable

from api.events.models import EventCreate
from iwems.aggregates import event_stats
from iwems.loaders import EventLoader
from iwems.models import EventStatus, Role
from iwems.screens import ScreenController


async def load_my_events(data_client, user_id: str, roles: Iterable[Role]) -> Dict[str, Any]:
    """Events the caller owns as a couple and/or plans as a planner, by date.

    Owned events are always included: a planner creating an event becomes its
    couple_id.
    """
    roles = set(roles)
    loader = EventLoader(data_client)
    calls = [loader.for_couple(user_id)]
    if Role.PLANNER in roles:
        calls.append(loader.for_planner(user_id))

    results = await asyncio.gather(*calls)
    for result in results:
        if result.get("status") != "success":
            return result

    merged = {}
    for result in results:
        for row in result.get("data", []):
            merged.setdefault(row.get("id"), row)
    events = sorted(merged.values(), key=lambda e: str(e.get("event_date") or ""))
    return {"status": "success", "data": events}


class EventsScreen(ScreenController):
    screen = "/events"
    primary_sections = ("events",)
    load_errors = {"events": "Failed to load events"}

    @property
    def roles(self):
        return self.decision.roles if self.decision else set()

    def loaders(self):
        return {"events": lambda: load_my_events(self.data_client, self.user_id, self.roles)}

    async def change_status(self, event_id: str, status: EventStatus) -> bool:
        # Transitions are the user's call; no ordering is enforced here.
        status = EventStatus(status)
        return await self.mutate(
            lambda: EventLoader(self.data_client).set_status(event_id, status),
            success_message=f"Event marked {status.value.replace('_', ' ')}",
            failure_message="Failed to update event status",
        )


class DashboardScreen(EventsScreen):
    screen = "/dashboard"

    def after_load(self) -> None:
        self.data["stats"] = event_stats(self.data.get("events", []))


class CreateEventScreen(EventsScreen):
    screen = "/events/create"

    def loaders(self):
        # The form starts empty; the events list is only fetched after a create.
        return {}

    async def create(self, form: EventCreate) -> bool:
        record = form.to_record(self.user_id)
        logging.info(f"Creating event '{form.title}' on {record['event_date']} for {self.user_id}")
        created = await self.mutate(
            lambda: EventLoader(self.data_client).create(record),
            success_message="Event created successfully!",
            failure_message="Failed to create event",
            form=form.model_dump(mode="json"),
        )
        if created:
            self.data.update(await self._reload_events())
            self.redirect_to = "/events"
        return created

    async def _reload_events(self) -> Dict[str, Any]:
        result = await load_my_events(self.data_client, self.user_id, self.roles)
        if result.get("status") != "success":
            self.notify("error", "Failed to load events")
            return {}
        return {"events": result["data"]}
