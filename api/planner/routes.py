from fastapi import APIRouter, Depends

from api.planner.service import PlannerScreen
from api.security import denied_response, get_data_client, get_session_store, render_screen, require_route
from iwems.models import ScreenView

planner_router = APIRouter()


@planner_router.get("", response_model=ScreenView)
async def planner_dashboard(
    decision=Depends(require_route("/planner")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
):
    if not decision.allowed:
        return denied_response("/planner", decision)
    return await render_screen(PlannerScreen(session_store, data_client, decision))
