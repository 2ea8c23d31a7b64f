import asyncio
import contextlib

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from loguru import logger
from redis.asyncio import Redis

from app.api.v1.dependency import CurrentUser, get_ws_redis_client
from app.api.v1.schemas.base import ApiOut
from app.api.v1.schemas.community import ChangeChatSettingsIn, SendMessageIn
from app.domain.chat.chat_domain import ChatService, subscribe
from app.domain.chat.chat_models import ChatMessageResponse, ChatSettingsParams, SendMessageParams
from app.schemas import Stream
from app.shared.api.utils import get_redis_major_client

router = APIRouter(prefix="/chat", tags=["Chat"])

_chat_service = ChatService()


def get_chat_service() -> ChatService:
    return _chat_service


@router.get("/find_by_stream/{stream_id}")
async def find_by_stream(
    stream_id: str,
    service: ChatService = Depends(get_chat_service),
) -> ApiOut[list[ChatMessageResponse]]:
    """Latest messages of a stream, newest first."""
    return ApiOut[list[ChatMessageResponse]](results=await service.find_by_stream(stream_id))


@router.post("/send_message")
async def send_message(
    body: SendMessageIn,
    user: CurrentUser,
    redis_client: Redis = Depends(get_redis_major_client),
    service: ChatService = Depends(get_chat_service),
) -> ApiOut[ChatMessageResponse]:
    params = SendMessageParams(**body.model_dump())
    result = await service.send_message(user, params, redis_client)
    return ApiOut[ChatMessageResponse](results=result)


@router.post("/change_chat_settings")
async def change_chat_settings(
    body: ChangeChatSettingsIn,
    user: CurrentUser,
    service: ChatService = Depends(get_chat_service),
) -> ApiOut[bool]:
    result = await service.change_chat_settings(user, ChatSettingsParams(**body.model_dump()))
    return ApiOut[bool](results=result)


async def _forward_messages(websocket: WebSocket, redis_client: Redis, stream_id: str) -> None:
    async for message in subscribe(redis_client, stream_id):
        await websocket.send_json(message)


@router.websocket("/ws/{stream_id}")
async def chat_ws(
    websocket: WebSocket,
    stream_id: str,
    redis_client: Redis = Depends(get_ws_redis_client),
):
    """Push every message sent to the stream's chat. Incoming frames are ignored."""
    stream = await Stream.find_one(Stream.stream_id == stream_id)
    if stream is None:
        logger.warning(f"WebSocket connection rejected: unknown stream_id={stream_id}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    forwarder = asyncio.create_task(_forward_messages(websocket, redis_client, stream_id))
    logger.debug(f"Chat subscriber connected to stream_id={stream_id}")

    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug(f"Chat subscriber disconnected from stream_id={stream_id}")
    finally:
        forwarder.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await forwarder
