from fastapi import Request
from fastapi.responses import JSONResponse
import logging

from iwems.roles import AccessDecision, AccessOutcome, evaluate_route
from iwems.models import ScreenView
from iwems.screens import denied_view
from iwems.session import SessionStore

# The guard here decides what this front-end renders. The data itself is
# protected by row-level security policies on the Supabase side.


def get_session_store(request: Request) -> SessionStore:
    """The single session handle of this running application."""
    return request.app.state.session_store


def get_data_client(request: Request):
    return request.app.state.data_client


def get_local_store(request: Request):
    return request.app.state.local_store


def require_route(route: str):
    """Dependency factory running the access guard for ``route``.

    The decision is returned, not raised, so handlers can answer a denial
    with ``denied_response`` before building any screen state.
    """
    async def _guard(request: Request) -> AccessDecision:
        decision = await evaluate_route(get_session_store(request), get_data_client(request), route)
        if decision.outcome != AccessOutcome.ALLOW:
            logging.info(f"Guard for {route}: {decision.outcome.value}, redirect_to={decision.redirect_to}")
        return decision
    return _guard


def denied_response(route: str, decision: AccessDecision) -> JSONResponse:
    """202 while the session is still loading, 401/403 with a redirect target otherwise."""
    view = denied_view(route, decision)
    if decision.outcome == AccessOutcome.PENDING:
        return JSONResponse(status_code=202, content=view.model_dump(mode="json"))
    status_code = 401 if decision.redirect_to == "/auth" else 403
    return JSONResponse(
        status_code=status_code,
        content=view.model_dump(mode="json"),
        headers={"Location": decision.redirect_to or "/"},
    )


async def render_screen(screen, action=None) -> ScreenView:
    """Mount ``screen``, optionally run one mutation on it, and unmount.

    Each request gets its own controller, so the session watch it registers
    is removed again once the view is rendered.
    """
    try:
        view = await screen.mount()
        if action is not None:
            await action()
            view = screen.render()
        return view
    finally:
        screen.unmount()
