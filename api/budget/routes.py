from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from logger import bind_context
from api.budget.models import CategoryCreate, CategoryUpdate, TotalBudgetUpdate
from api.budget.service import BudgetScreen
from api.security import (
    denied_response,
    get_data_client,
    get_local_store,
    get_session_store,
    render_screen,
    require_route,
)
from iwems.models import ScreenView

logger = bind_context(component="budget")

budget_router = APIRouter()


def _screen(decision, session_store, data_client, local_store) -> BudgetScreen:
    return BudgetScreen(session_store, data_client, decision, local_store=local_store)


async def _render_category_change(screen: BudgetScreen, action, category_id: int):
    try:
        return await render_screen(screen, action)
    except KeyError:
        logger.warning(f"Budget category {category_id} not found")
        raise HTTPException(status_code=404, detail=f"Category {category_id} not found")


@budget_router.get("", response_model=ScreenView)
async def budget_tracker(
    decision=Depends(require_route("/budget")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
    local_store=Depends(get_local_store),
):
    if not decision.allowed:
        return denied_response("/budget", decision)
    return await render_screen(_screen(decision, session_store, data_client, local_store))


@budget_router.put("/total", response_model=ScreenView)
async def set_total_budget(
    body: TotalBudgetUpdate,
    decision=Depends(require_route("/budget")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
    local_store=Depends(get_local_store),
):
    if not decision.allowed:
        return denied_response("/budget", decision)
    screen = _screen(decision, session_store, data_client, local_store)
    return await render_screen(screen, lambda: screen.set_total_budget(body.total_budget))


@budget_router.post("/categories", response_model=ScreenView)
async def add_category(
    body: CategoryCreate,
    decision=Depends(require_route("/budget")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
    local_store=Depends(get_local_store),
):
    if not decision.allowed:
        return denied_response("/budget", decision)
    screen = _screen(decision, session_store, data_client, local_store)
    return await render_screen(screen, lambda: screen.add_category(body.name, body.budget, body.spent, body.color))


@budget_router.patch("/categories/{category_id}", response_model=ScreenView)
async def edit_category(
    category_id: int,
    body: CategoryUpdate,
    decision=Depends(require_route("/budget")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
    local_store=Depends(get_local_store),
):
    if not decision.allowed:
        return denied_response("/budget", decision)
    screen = _screen(decision, session_store, data_client, local_store)
    return await _render_category_change(
        screen, lambda: screen.edit_category(category_id, body.budget, body.spent), category_id
    )


@budget_router.delete("/categories/{category_id}", response_model=ScreenView)
async def delete_category(
    category_id: int,
    decision=Depends(require_route("/budget")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
    local_store=Depends(get_local_store),
):
    if not decision.allowed:
        return denied_response("/budget", decision)
    screen = _screen(decision, session_store, data_client, local_store)
    return await _render_category_change(screen, lambda: screen.delete_category(category_id), category_id)


@budget_router.post("/reset", response_model=ScreenView)
async def reset_budget(
    decision=Depends(require_route("/budget")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
    local_store=Depends(get_local_store),
):
    if not decision.allowed:
        return denied_response("/budget", decision)
    screen = _screen(decision, session_store, data_client, local_store)
    return await render_screen(screen, screen.reset)


@budget_router.get("/export")
async def export_budget(
    decision=Depends(require_route("/budget")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
    local_store=Depends(get_local_store),
):
    if not decision.allowed:
        return denied_response("/budget", decision)
    screen = _screen(decision, session_store, data_client, local_store)
    await render_screen(screen)
    document, filename = screen.export()
    logger.info(f"Exporting budget as {filename}")
    return JSONResponse(content=document, headers={"Content-Disposition": f'attachment; filename="{filename}"'})


@budget_router.post("/storage-test", response_model=ScreenView)
async def test_storage(
    decision=Depends(require_route("/budget")),
    session_store=Depends(get_session_store),
    data_client=Depends(get_data_client),
    local_store=Depends(get_local_store),
):
    if not decision.allowed:
        return denied_response("/budget", decision)
    screen = _screen(decision, session_store, data_client, local_store)
    return await render_screen(screen, screen.test_storage)
