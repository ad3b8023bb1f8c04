from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Dict, Optional
import asyncio
import logging
import uuid
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from config import APP_NAME, CORS_ORIGINS
from logging_setup import setup_logging
from iwems.exceptions import LocalStoreError, ValidationFailed
from iwems.helpers import get_data_client
from iwems.local_store import create_local_store
from iwems.models import Notice, ScreenView, ViewState
from iwems.roles import USER_ROLES_TABLE
from iwems.session import SessionStore
from api.admin.routes import admin_router
from api.auth.routes import auth_router
from api.budget.routes import budget_router
from api.cultural.routes import cultural_router
from api.events.routes import events_router
from api.home.routes import home_router
from api.planner.routes import planner_router
from api.vendor_dashboard.routes import vendor_dashboard_router
from api.vendors.routes import vendors_router
from api.venue_manager.routes import venue_manager_router
from api.venues.routes import venues_router

# Ensure logging is configured when the app module is imported (e.g., under uvicorn)
setup_logging()


# Custom middleware to add request context to logger
class ProcessRequestMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        session_store = getattr(request.app.state, "session_store", None)
        identity = session_store.identity if session_store is not None else None
        user_id = identity.id if identity else None

        logging.info(f"request_id={request_id}, method={request.method}, path={request.url.path}, user_id={user_id}")
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class HealthCheckResult(BaseModel):
    status: str
    message: Optional[str] = None


class OverallHealthStatus(BaseModel):
    status: str
    checks: Dict[str, HealthCheckResult]


async def check_supabase_health(data_client) -> HealthCheckResult:
    if data_client is None:
        return HealthCheckResult(status="unavailable", message="Supabase client not initialized")
    result = await data_client.select(USER_ROLES_TABLE, "*", count_only=True)
    if result.get("status") == "success":
        return HealthCheckResult(status="ok", message="Supabase is reachable")
    logging.error(f"Supabase health check failed: {result.get('error')}")
    return HealthCheckResult(status="unavailable", message=f"Supabase query failed: {result.get('error')}")


async def check_local_store_health(local_store) -> HealthCheckResult:
    try:
        await asyncio.to_thread(local_store.get_item, "test-key")
    except LocalStoreError as e:
        logging.error(f"Local store health check failed: {e}")
        return HealthCheckResult(status="degraded", message=str(e))
    return HealthCheckResult(status="ok", message=f"Local storage ({local_store.backend}) is readable")


async def check_session_health(session_store: SessionStore) -> HealthCheckResult:
    if not session_store.initialized:
        return HealthCheckResult(status="degraded", message="Session not initialized yet")
    state = "signed in" if session_store.is_authenticated else "signed out"
    return HealthCheckResult(status="ok", message=f"Session initialized ({state})")


def create_app(data_client=None, local_store=None) -> FastAPI:
    """Build the application around one session store.

    ``data_client`` and ``local_store`` default to the Supabase client and the
    configured local storage backend; tests pass in-memory stand-ins.
    """
    app = FastAPI(title=APP_NAME)
    app.state.session_store = SessionStore()
    app.state.data_client = data_client
    app.state.local_store = local_store if local_store is not None else create_local_store()

    @app.on_event("startup")
    async def startup_event():
        logging.info("Application startup event.")
        if app.state.data_client is None:
            app.state.data_client = get_data_client()
        await app.state.session_store.attach(app.state.data_client)

    @app.on_event("shutdown")
    async def shutdown_event():
        logging.info("Application shutdown event.")
        app.state.session_store.detach()

    app.add_middleware(ProcessRequestMiddleware)

    # CORS Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationFailed)
    async def validation_failed_handler(request: Request, exc: ValidationFailed):
        logging.info(f"Validation failed on {request.url.path}: {exc.field}: {exc.message}")
        return JSONResponse(status_code=422, content={"detail": exc.message, "field": exc.field})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            view = ScreenView(
                screen=request.url.path,
                state=ViewState.REDIRECTED,
                notices=[Notice(level="error", message="Page not found")],
                redirect_to="/",
            )
            return JSONResponse(status_code=404, content=view.model_dump(mode="json"))
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)

    @app.get("/health", response_model=OverallHealthStatus, tags=["Health"])
    async def health_check():
        application_status = HealthCheckResult(status="ok", message="Application is running")

        supabase_status, local_store_status, session_status = await asyncio.gather(
            check_supabase_health(app.state.data_client),
            check_local_store_health(app.state.local_store),
            check_session_health(app.state.session_store),
        )

        all_checks = {
            "application": application_status,
            "supabase": supabase_status,
            "local_store": local_store_status,
            "session": session_status,
        }

        overall_status = "ok"
        if any(check.status == "unavailable" for check in all_checks.values()):
            overall_status = "unavailable"
        elif any(check.status == "degraded" for check in all_checks.values()):
            overall_status = "degraded"

        return OverallHealthStatus(status=overall_status, checks=all_checks)

    app.include_router(home_router, tags=["Home"])
    app.include_router(auth_router, prefix="/auth", tags=["Auth"])
    app.include_router(events_router, tags=["Events"])
    app.include_router(vendors_router, prefix="/vendors", tags=["Vendors"])
    app.include_router(venues_router, prefix="/venues", tags=["Venues"])
    app.include_router(planner_router, prefix="/planner", tags=["Planner"])
    app.include_router(admin_router, prefix="/admin", tags=["Admin"])
    app.include_router(venue_manager_router, prefix="/venue-manager", tags=["Venue Manager"])
    app.include_router(vendor_dashboard_router, prefix="/vendor-dashboard", tags=["Vendor Dashboard"])
    app.include_router(budget_router, prefix="/budget", tags=["Budget"])
    app.include_router(cultural_router, prefix="/cultural", tags=["Cultural"])

    return app


app = create_app()
