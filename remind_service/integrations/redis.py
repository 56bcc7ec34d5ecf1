from __future__ import annotations

from redis.asyncio import Redis

from remind_service.core.config import get_settings

HEALTH_CHECK_INTERVAL_SEC = 30

_redis_client: Redis | None = None


def create_redis(url: str | None = None) -> Redis:
    """Build a client without connecting. Socket timeouts follow ``event_publish_timeout_sec``."""
    settings = get_settings()
    return Redis.from_url(
        url or settings.redis_url,
        decode_responses=True,
        socket_timeout=settings.event_publish_timeout_sec,
        socket_connect_timeout=settings.event_publish_timeout_sec,
        health_check_interval=HEALTH_CHECK_INTERVAL_SEC,
    )


async def get_redis() -> Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = create_redis()
    return _redis_client


async def close_redis() -> None:
    global _redis_client
    client, _redis_client = _redis_client, None
    if client is not None:
        await client.aclose()
