from fastapi import APIRouter, Depends

from app.api.v1.dependency import CurrentUser
from app.api.v1.schemas.base import ApiOut
from app.api.v1.schemas.stream import CreateIngressIn
from app.domain.stream.ingress_domain import IngressService
from app.domain.stream.stream_models import StreamOwnerResponse

router = APIRouter(prefix="/ingress", tags=["Stream"])

_ingress_service = IngressService()


def get_ingress_service() -> IngressService:
    return _ingress_service


@router.post("/create")
async def create(
    body: CreateIngressIn,
    user: CurrentUser,
    service: IngressService = Depends(get_ingress_service),
) -> ApiOut[StreamOwnerResponse]:
    """Replace the broadcaster's ingress. Returns the new server URL and stream key."""
    result = await service.create(user, body.ingress_type)
    return ApiOut[StreamOwnerResponse](results=result)
