from fastapi import APIRouter, Depends

from app.api.v1.dependency import CurrentUser
from app.api.v1.schemas.auth import EnableTotpIn
from app.api.v1.schemas.base import ApiOut
from app.domain.auth.security_models import EnableTotpParams, TotpProvisioning
from app.domain.auth.totp_domain import TotpService

router = APIRouter(prefix="/totp", tags=["Two-factor"])

_totp_service = TotpService()


def get_totp_service() -> TotpService:
    return _totp_service


@router.get("/generate")
async def generate(
    user: CurrentUser,
    service: TotpService = Depends(get_totp_service),
) -> ApiOut[TotpProvisioning]:
    """New secret and otpauth URI for the authenticator app. Not stored until enabled."""
    return ApiOut[TotpProvisioning](results=await service.generate(user))


@router.post("/enable")
async def enable(
    body: EnableTotpIn,
    user: CurrentUser,
    service: TotpService = Depends(get_totp_service),
) -> ApiOut[bool]:
    result = await service.enable(user, EnableTotpParams(**body.model_dump()))
    return ApiOut[bool](results=result)


@router.post("/disable")
async def disable(
    user: CurrentUser,
    service: TotpService = Depends(get_totp_service),
) -> ApiOut[bool]:
    return ApiOut[bool](results=await service.disable(user))
