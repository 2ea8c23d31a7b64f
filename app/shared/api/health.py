from fastapi import APIRouter, Depends
from loguru import logger
from redis.asyncio import Redis
from redis.exceptions import RedisError

from .utils import ApiFailure, ApiSuccess, get_redis_major_client, make_response

router = APIRouter()


@router.get("/health", response_model=ApiSuccess)
async def health():
    return ApiSuccess(results="OK")


@router.get("/ready")
async def ready(redis_client: Redis = Depends(get_redis_major_client)):
    try:
        await redis_client.ping()
    except RedisError as e:
        logger.error(f"Readiness check failed: redis unavailable: {e}")
        return make_response(ApiFailure(errmesg="redis unavailable"), status_code=503)
    return ApiSuccess(results="READY")
