from fastapi import APIRouter, Depends, File, UploadFile
import logging

from api.security import denied_response, get_data_client, get_session_store, render_screen, require_route
from api.vendor_dashboard.models import InquiryStatusUpdate, PortfolioImageRemove, VendorProfileForm
from api.vendor_dashboard.service import VendorDashboardScreen
from iwems.models import ScreenView

vendor_dashboard_router = APIRouter()

ROUTE = "/vendor-dashboard"


@vendor_dashboard_router.get("", response_model=ScreenView)
async def vendor_dashboard(
    decision=Depends(require_route(ROUTE)),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response(ROUTE, decision)
    return await render_screen(VendorDashboardScreen(session_store, data_client, decision))


@vendor_dashboard_router.put("/profile", response_model=ScreenView)
async def save_profile(
    body: VendorProfileForm,
    decision=Depends(require_route(ROUTE)),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response(ROUTE, decision)
    logging.info(f"Received vendor profile save: {body.model_dump_json()}")
    screen = VendorDashboardScreen(session_store, data_client, decision)
    return await render_screen(screen, lambda: screen.save_profile(body))


@vendor_dashboard_router.post("/portfolio", response_model=ScreenView)
async def upload_portfolio_image(
    file: UploadFile = File(...),
    decision=Depends(require_route(ROUTE)),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response(ROUTE, decision)
    content = await file.read()
    logging.info(f"Received portfolio upload {file.filename} ({len(content)} bytes, {file.content_type})")
    screen = VendorDashboardScreen(session_store, data_client, decision)
    return await render_screen(
        screen,
        lambda: screen.upload_image(file.filename or "image", content, file.content_type or "application/octet-stream"),
    )


@vendor_dashboard_router.post("/portfolio/remove", response_model=ScreenView)
async def remove_portfolio_image(
    body: PortfolioImageRemove,
    decision=Depends(require_route(ROUTE)),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response(ROUTE, decision)
    screen = VendorDashboardScreen(session_store, data_client, decision)
    return await render_screen(screen, lambda: screen.remove_image(body.image_url))


@vendor_dashboard_router.patch("/inquiries/{inquiry_id}", response_model=ScreenView)
async def update_inquiry_status(
    inquiry_id: str,
    body: InquiryStatusUpdate,
    decision=Depends(require_route(ROUTE)),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response(ROUTE, decision)
    logging.info(f"Received inquiry status change for {inquiry_id}: {body.status.value}")
    screen = VendorDashboardScreen(session_store, data_client, decision)
    return await render_screen(screen, lambda: screen.update_inquiry(inquiry_id, body.status))
