# fastapi-limiter lifecycle, backed by Redis
import logging

from fastapi import Request
from fastapi_limiter import FastAPILimiter
import redis.asyncio as redis

from guestbook.core.config import settings

logger = logging.getLogger(__name__)


async def client_identifier(request: Request) -> str:
    """
    Limit key: the visitor's address plus the route path. Behind a proxy the
    first X-Forwarded-For hop is the visitor.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    elif request.client:
        ip = request.client.host
    else:
        ip = "unknown"
    return f"{ip}:{request.scope['path']}"


async def init_rate_limiter():
    redis_client = redis.Redis(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        decode_responses=True
    )
    await FastAPILimiter.init(
        redis_client,
        prefix=settings.RATE_LIMIT_PREFIX,
        identifier=client_identifier,
    )
    logger.info(f"Rate limiter ready on {settings.REDIS_HOST}:{settings.REDIS_PORT}")


async def close_rate_limiter():
    await FastAPILimiter.close()
