from typing import Any, Dict

from logger import bind_context
from iwems.exceptions import NotAuthenticated, StoreError
from iwems.loaders import RoleLoader
from iwems.models import Role
from iwems.roles import LANDING_ROUTE, default_route_for, fetch_roles
from iwems.session import SessionStore

logger = bind_context(component="auth")


async def home_route_for(data_client, user_id: str) -> str:
    result = await fetch_roles(data_client, user_id)
    if result.get("status") != "success":
        return LANDING_ROUTE
    return default_route_for(result["roles"])


async def sign_in(session_store: SessionStore, data_client, email: str, password: str) -> Dict[str, Any]:
    result = await data_client.sign_in(email, password)
    if result.get("status") != "success" or result.get("identity") is None:
        logger.warning(f"Sign-in failed for {email}: {result.get('error')}")
        raise StoreError(result.get("error") or "Invalid login credentials")

    identity = result["identity"]
    session_store.handle_auth_event("SIGNED_IN", identity)
    logger.info(f"Signed in user {identity.id}")
    return {"identity": identity, "redirect_to": await home_route_for(data_client, identity.id)}


async def sign_up(session_store: SessionStore, data_client, email: str, password: str, full_name: str, role: Role) -> Dict[str, Any]:
    result = await data_client.sign_up(email, password, full_name)
    if result.get("status") != "success" or result.get("identity") is None:
        logger.warning(f"Sign-up failed for {email}: {result.get('error')}")
        raise StoreError(result.get("error") or "Sign-up failed")

    identity = result["identity"]
    session_store.handle_auth_event("SIGNED_IN", identity)

    assigned = await RoleLoader(data_client).assign(identity.id, role)
    if assigned.get("status") != "success":
        # The account exists; an admin can still grant the role later.
        logger.error(f"Could not assign initial role {role.value} to {identity.id}: {assigned.get('error')}")
        return {"identity": identity, "redirect_to": LANDING_ROUTE, "message": "Account created, but the role could not be saved"}

    logger.info(f"Signed up user {identity.id} as {role.value}")
    return {"identity": identity, "redirect_to": default_route_for({role}), "message": "Account created successfully!"}


async def sign_out(session_store: SessionStore, data_client) -> Dict[str, Any]:
    if not session_store.is_authenticated:
        raise NotAuthenticated("Nobody is signed in")
    result = await data_client.sign_out()
    if result.get("status") != "success":
        logger.error(f"Sign-out failed: {result.get('error')}")
        raise StoreError(result.get("error") or "Sign-out failed")
    session_store.handle_auth_event("SIGNED_OUT", None)
    logger.info("Signed out")
    return {"identity": None, "redirect_to": LANDING_ROUTE, "message": "Logged out successfully"}
