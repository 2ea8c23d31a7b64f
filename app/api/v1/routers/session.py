from fastapi import APIRouter, Depends, Response

from app.api.v1.dependency import (
    CookieSigner,
    CurrentSession,
    CurrentUser,
    Metadata,
    SessionStoreDep,
    clear_session_cookie,
    set_session_cookie,
)
from app.api.v1.schemas.auth import LoginIn, LoginOut, RemoveSessionIn
from app.api.v1.schemas.base import ApiOut
from app.domain.auth.account_models import UserResponse
from app.domain.auth.session_domain import SessionService
from app.domain.auth.session_models import LoginParams, SessionResponse

router = APIRouter(prefix="/session", tags=["Session"])

# Singleton instance
_session_service = SessionService()


def get_session_service() -> SessionService:
    """Get the singleton SessionService instance."""
    return _session_service


@router.post("/login")
async def login(
    body: LoginIn,
    response: Response,
    store: SessionStoreDep,
    signer: CookieSigner,
    metadata: Metadata,
    service: SessionService = Depends(get_session_service),
) -> ApiOut[LoginOut]:
    """Sign in with username or email, password and, when enabled, a TOTP pin."""
    user, record = await service.login(LoginParams(**body.model_dump()), store, metadata)
    set_session_cookie(response, record, signer)
    return ApiOut[LoginOut](results=LoginOut(user=UserResponse.from_user(user)))


@router.post("/logout")
async def logout(
    response: Response,
    session: CurrentSession,
    store: SessionStoreDep,
    service: SessionService = Depends(get_session_service),
) -> ApiOut[bool]:
    result = await service.logout(store, session.session_id)
    clear_session_cookie(response)
    return ApiOut[bool](results=result)


@router.get("/find_by_user")
async def find_by_user(
    user: CurrentUser,
    session: CurrentSession,
    store: SessionStoreDep,
    service: SessionService = Depends(get_session_service),
) -> ApiOut[list[SessionResponse]]:
    """Other active sessions of the current user, newest first."""
    result = await service.find_by_user(user, store, session.session_id)
    return ApiOut[list[SessionResponse]](results=result)


@router.get("/find_current")
async def find_current(
    session: CurrentSession,
    store: SessionStoreDep,
    service: SessionService = Depends(get_session_service),
) -> ApiOut[SessionResponse]:
    return ApiOut[SessionResponse](results=await service.find_current(store, session.session_id))


@router.post("/remove")
async def remove(
    body: RemoveSessionIn,
    user: CurrentUser,
    session: CurrentSession,
    store: SessionStoreDep,
    service: SessionService = Depends(get_session_service),
) -> ApiOut[bool]:
    result = await service.remove(user, store, session.session_id, body.session_id)
    return ApiOut[bool](results=result)


@router.post("/clear_session")
async def clear_session(response: Response) -> ApiOut[bool]:
    """Drop the session cookie without touching the server-side record."""
    clear_session_cookie(response)
    return ApiOut[bool](results=True)
