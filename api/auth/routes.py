from fastapi import APIRouter, Depends, HTTPException

from logger import bind_context
from api.auth import service
from api.auth.models import SessionResponse, SignInRequest, SignUpRequest
from api.security import get_data_client, get_session_store
from iwems.exceptions import NotAuthenticated, StoreError

logger = bind_context(component="auth")

auth_router = APIRouter()


@auth_router.get("", response_model=SessionResponse)
async def current_session(session_store=Depends(get_session_store), data_client=Depends(get_data_client)):
    redirect_to = None
    if session_store.identity is not None:
        # A signed-in user visiting the auth screen is sent to their home screen.
        redirect_to = await service.home_route_for(data_client, session_store.identity.id)
    return SessionResponse(initialized=session_store.initialized, identity=session_store.identity, redirect_to=redirect_to)


@auth_router.post("/sign-in", response_model=SessionResponse)
async def sign_in(body: SignInRequest, session_store=Depends(get_session_store), data_client=Depends(get_data_client)):
    logger.info(f"Received sign-in request for {body.email}")
    try:
        result = await service.sign_in(session_store, data_client, body.email, body.password)
    except StoreError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return SessionResponse(initialized=True, **result)


@auth_router.post("/sign-up", response_model=SessionResponse, status_code=201)
async def sign_up(body: SignUpRequest, session_store=Depends(get_session_store), data_client=Depends(get_data_client)):
    logger.info(f"Received sign-up request for {body.email} as {body.role.value}")
    try:
        result = await service.sign_up(session_store, data_client, body.email, body.password, body.full_name, body.role)
    except StoreError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SessionResponse(initialized=True, **result)


@auth_router.post("/sign-out", response_model=SessionResponse)
async def sign_out(session_store=Depends(get_session_store), data_client=Depends(get_data_client)):
    try:
        result = await service.sign_out(session_store, data_client)
    except NotAuthenticated as e:
        raise HTTPException(status_code=401, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return SessionResponse(initialized=True, **result)
