from fastapi import APIRouter, Depends, File, Query, UploadFile

from app.api.v1.dependency import CurrentUser, OptionalUser
from app.api.v1.schemas.base import ApiOut
from app.api.v1.schemas.stream import ChangeStreamInfoIn, GenerateStreamTokenIn
from app.domain.stream.stream_domain import StreamService
from app.domain.stream.stream_models import (
    ChangeStreamInfoParams,
    FindStreamsParams,
    StreamOwnerResponse,
    StreamResponse,
    StreamTokenResponse,
)

router = APIRouter(prefix="/stream", tags=["Stream"])

_stream_service = StreamService()


def get_stream_service() -> StreamService:
    return _stream_service


@router.get("/find_all")
async def find_all(
    take: int = Query(12, ge=1, le=100, description="Number of streams to return"),
    skip: int = Query(0, ge=0, description="Number of streams to skip"),
    search_term: str | None = Query(None, description="Matches stream title or owner username"),
    service: StreamService = Depends(get_stream_service),
) -> ApiOut[list[StreamResponse]]:
    """Live streams first, then the most recently updated."""
    params = FindStreamsParams(take=take, skip=skip, search_term=search_term)
    return ApiOut[list[StreamResponse]](results=await service.find_all(params))


@router.get("/find_random")
async def find_random(
    service: StreamService = Depends(get_stream_service),
) -> ApiOut[list[StreamResponse]]:
    return ApiOut[list[StreamResponse]](results=await service.find_random())


@router.get("/find_mine")
async def find_mine(
    user: CurrentUser,
    service: StreamService = Depends(get_stream_service),
) -> ApiOut[StreamOwnerResponse]:
    return ApiOut[StreamOwnerResponse](results=await service.find_mine(user))


@router.post("/change_info")
async def change_info(
    body: ChangeStreamInfoIn,
    user: CurrentUser,
    service: StreamService = Depends(get_stream_service),
) -> ApiOut[StreamOwnerResponse]:
    result = await service.change_info(user, ChangeStreamInfoParams(**body.model_dump()))
    return ApiOut[StreamOwnerResponse](results=result)


@router.post("/change_thumbnail")
async def change_thumbnail(
    user: CurrentUser,
    thumbnail: UploadFile = File(...),
    service: StreamService = Depends(get_stream_service),
) -> ApiOut[StreamOwnerResponse]:
    body = await thumbnail.read()
    result = await service.change_thumbnail(user, body, thumbnail.content_type)
    return ApiOut[StreamOwnerResponse](results=result)


@router.post("/remove_thumbnail")
async def remove_thumbnail(
    user: CurrentUser,
    service: StreamService = Depends(get_stream_service),
) -> ApiOut[StreamOwnerResponse]:
    return ApiOut[StreamOwnerResponse](results=await service.remove_thumbnail(user))


@router.post("/generate_token")
async def generate_token(
    body: GenerateStreamTokenIn,
    viewer: OptionalUser,
    service: StreamService = Depends(get_stream_service),
) -> ApiOut[StreamTokenResponse]:
    """Room token for watching a channel. Works without a session."""
    result = await service.generate_token(viewer, body.channel_id)
    return ApiOut[StreamTokenResponse](results=result)
