from fastapi import APIRouter, Depends, Response

from app.api.v1.dependency import (
    CookieSigner,
    CurrentUser,
    Metadata,
    SessionStoreDep,
    set_session_cookie,
)
from app.api.v1.schemas.auth import (
    ChangeEmailIn,
    ChangePasswordIn,
    CreateUserIn,
    LoginOut,
    VerifyEmailIn,
)
from app.api.v1.schemas.base import ApiOut
from app.domain.auth.account_domain import AccountService
from app.domain.auth.account_models import (
    ChangeEmailParams,
    ChangePasswordParams,
    CreateUserParams,
    UserResponse,
)

router = APIRouter(prefix="/account", tags=["Account"])

# Singleton instance
_account_service = AccountService()


def get_account_service() -> AccountService:
    """Get the singleton AccountService instance."""
    return _account_service


@router.post("/create_user")
async def create_user(
    body: CreateUserIn,
    service: AccountService = Depends(get_account_service),
) -> ApiOut[UserResponse]:
    """Register a new account. A verification link is mailed to the given address."""
    params = CreateUserParams(**body.model_dump())
    result = await service.create_user(params)
    return ApiOut[UserResponse](results=result)


@router.post("/verify_email")
async def verify_email(
    body: VerifyEmailIn,
    response: Response,
    store: SessionStoreDep,
    signer: CookieSigner,
    metadata: Metadata,
    service: AccountService = Depends(get_account_service),
) -> ApiOut[LoginOut]:
    """Confirm the email address and sign in."""
    user, record = await service.verify_email(body.token, store, metadata)
    set_session_cookie(response, record, signer)
    return ApiOut[LoginOut](results=LoginOut(user=user))


@router.get("/me")
async def me(
    user: CurrentUser,
    service: AccountService = Depends(get_account_service),
) -> ApiOut[UserResponse]:
    return ApiOut[UserResponse](results=await service.me(user))


@router.post("/change_email")
async def change_email(
    body: ChangeEmailIn,
    user: CurrentUser,
    service: AccountService = Depends(get_account_service),
) -> ApiOut[UserResponse]:
    result = await service.change_email(user, ChangeEmailParams(**body.model_dump()))
    return ApiOut[UserResponse](results=result)


@router.post("/change_password")
async def change_password(
    body: ChangePasswordIn,
    user: CurrentUser,
    service: AccountService = Depends(get_account_service),
) -> ApiOut[bool]:
    result = await service.change_password(user, ChangePasswordParams(**body.model_dump()))
    return ApiOut[bool](results=result)
