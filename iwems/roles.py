"""Role resolution and route gating.

``evaluate_access`` is the guard every protected screen runs before it builds
its controller. It returns a tri-state decision so a screen can tell "still
loading" apart from "denied". The real security boundary is row-level
security in the database; this guard only decides what to render.
"""
import logging
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Set

from pydantic import BaseModel

from iwems.models import Notice, Role

USER_ROLES_TABLE = "user_roles"

PLANNING_ROLES = frozenset({Role.COUPLE, Role.PLANNER})

# Route -> roles allowed to view it. None means public.
ROUTES: Dict[str, Optional[FrozenSet[Role]]] = {
    "/": None,
    "/auth": None,
    "/dashboard": PLANNING_ROLES,
    "/events": PLANNING_ROLES,
    "/events/create": PLANNING_ROLES,
    "/vendors": PLANNING_ROLES,
    "/venues": PLANNING_ROLES,
    "/budget": PLANNING_ROLES,
    "/cultural": PLANNING_ROLES,
    "/planner": frozenset({Role.PLANNER}),
    "/admin": frozenset({Role.ADMIN}),
    "/venue-manager": frozenset({Role.VENUE_MANAGER}),
    "/vendor-dashboard": frozenset({Role.VENDOR}),
}

# First match wins when picking where to send a denied user.
HOME_ROUTES = [
    (Role.ADMIN, "/admin"),
    (Role.COUPLE, "/dashboard"),
    (Role.PLANNER, "/dashboard"),
    (Role.VENUE_MANAGER, "/venue-manager"),
    (Role.VENDOR, "/vendor-dashboard"),
]

LOGIN_ROUTE = "/auth"
LANDING_ROUTE = "/"


class AccessOutcome(str, Enum):
    ALLOW = "allow"
    DENY = "deny"
    PENDING = "pending"


class AccessDecision(BaseModel):
    outcome: AccessOutcome
    roles: Set[Role] = set()
    redirect_to: Optional[str] = None
    notice: Optional[Notice] = None

    @property
    def allowed(self) -> bool:
        return self.outcome == AccessOutcome.ALLOW


def has_access(roles: Iterable[Role], required: Optional[Iterable[Role]]) -> bool:
    """Access is granted iff the role sets intersect (public routes always pass)."""
    if required is None:
        return True
    return bool(set(roles) & set(required))


def default_route_for(roles: Iterable[Role]) -> str:
    held = set(roles)
    for role, route in HOME_ROUTES:
        if role in held:
            return route
    return LANDING_ROUTE


async def fetch_roles(data_client, user_id: str) -> Dict:
    """Load the role set assigned to ``user_id``.

    Returns ``{"status": "success", "roles": {...}}`` or the client's error dict.
    Unknown role strings in the table are ignored.
    """
    result = await data_client.select(USER_ROLES_TABLE, "role", eq={"user_id": user_id})
    if result.get("status") != "success":
        return result

    roles = set()
    for row in result.get("data", []):
        try:
            roles.add(Role(row.get("role")))
        except ValueError:
            logging.warning(f"fetch_roles: ignoring unknown role {row.get('role')!r} for user {user_id}")
    return {"status": "success", "roles": roles}


async def evaluate_access(session_store, data_client, required: Optional[Iterable[Role]]) -> AccessDecision:
    if required is None:
        return AccessDecision(outcome=AccessOutcome.ALLOW)

    if not session_store.initialized:
        return AccessDecision(outcome=AccessOutcome.PENDING)

    identity = session_store.identity
    if identity is None:
        return AccessDecision(
            outcome=AccessOutcome.DENY,
            redirect_to=LOGIN_ROUTE,
            notice=Notice(level="info", message="Please sign in to continue"),
        )

    result = await fetch_roles(data_client, identity.id)
    if result.get("status") != "success":
        logging.error(f"evaluate_access: role lookup failed for {identity.id}: {result.get('error')}")
        return AccessDecision(
            outcome=AccessOutcome.DENY,
            redirect_to=LANDING_ROUTE,
            notice=Notice(level="error", message="Failed to check access"),
        )

    roles = result["roles"]
    if not has_access(roles, required):
        logging.info(f"evaluate_access: {identity.id} with roles {sorted(r.value for r in roles)} denied")
        return AccessDecision(
            outcome=AccessOutcome.DENY,
            roles=roles,
            redirect_to=default_route_for(roles),
            notice=Notice(level="error", message="Access denied"),
        )

    return AccessDecision(outcome=AccessOutcome.ALLOW, roles=roles)


async def evaluate_route(session_store, data_client, route: str) -> AccessDecision:
    return await evaluate_access(session_store, data_client, ROUTES.get(route))
