from fastapi import APIRouter, Depends, Response

from app.api.v1.dependency import CurrentUser, Metadata, SessionStoreDep, clear_session_cookie
from app.api.v1.schemas.auth import DeactivateIn
from app.api.v1.schemas.base import ApiOut
from app.domain.auth.deactivate_domain import DeactivateService
from app.domain.auth.security_models import DeactivateParams, DeactivateResult

router = APIRouter(prefix="/deactivate", tags=["Account"])

_deactivate_service = DeactivateService()


def get_deactivate_service() -> DeactivateService:
    return _deactivate_service


@router.post("")
async def deactivate(
    body: DeactivateIn,
    response: Response,
    user: CurrentUser,
    store: SessionStoreDep,
    metadata: Metadata,
    service: DeactivateService = Depends(get_deactivate_service),
) -> ApiOut[DeactivateResult]:
    """Without a pin a confirmation code is sent. With the code the account is deactivated."""
    result = await service.deactivate(user, DeactivateParams(**body.model_dump()), store, metadata)
    if not result.confirmation_needed:
        clear_session_cookie(response)
    return ApiOut[DeactivateResult](results=result)
