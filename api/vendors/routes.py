from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from api.security import denied_response, get_data_client, get_session_store, render_screen, require_route
from api.vendors.models import InquiryCreate
from api.vendors.service import VendorDirectoryScreen
from iwems.models import ScreenView, VendorCategory

vendors_router = APIRouter()


@vendors_router.get("", response_model=ScreenView)
async def vendor_directory(
    search: str = Query("", description="Matches business name, description or location"),
    category: Optional[VendorCategory] = None,
    decision=Depends(require_route("/vendors")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response("/vendors", decision)
    screen = VendorDirectoryScreen(
        session_store, data_client, decision, search=search, category=category.value if category else None
    )
    return await render_screen(screen)


@vendors_router.post("/inquiries", response_model=ScreenView)
async def send_inquiry(
    body: InquiryCreate,
    decision=Depends(require_route("/vendors")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response("/vendors", decision)
    logging.info(f"Received inquiry for vendor {body.vendor_id} about event {body.event_id}")
    screen = VendorDirectoryScreen(session_store, data_client, decision)
    return await render_screen(screen, lambda: screen.send_inquiry(body))
