from fastapi import APIRouter, Depends

from app.api.v1.dependency import Metadata
from app.api.v1.schemas.auth import NewPasswordIn, ResetPasswordIn
from app.api.v1.schemas.base import ApiOut
from app.domain.auth.password_recovery_domain import PasswordRecoveryService
from app.domain.auth.security_models import NewPasswordParams, ResetPasswordParams

router = APIRouter(prefix="/password_recovery", tags=["Password recovery"])

_password_recovery_service = PasswordRecoveryService()


def get_password_recovery_service() -> PasswordRecoveryService:
    return _password_recovery_service


@router.post("/reset_password")
async def reset_password(
    body: ResetPasswordIn,
    metadata: Metadata,
    service: PasswordRecoveryService = Depends(get_password_recovery_service),
) -> ApiOut[bool]:
    """Mail a password reset link to the account's address."""
    result = await service.reset_password(ResetPasswordParams(**body.model_dump()), metadata)
    return ApiOut[bool](results=result)


@router.post("/new_password")
async def new_password(
    body: NewPasswordIn,
    service: PasswordRecoveryService = Depends(get_password_recovery_service),
) -> ApiOut[bool]:
    result = await service.new_password(NewPasswordParams(**body.model_dump()))
    return ApiOut[bool](results=result)
