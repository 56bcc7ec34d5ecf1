from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from remind_service.core.config import get_settings
from remind_service.db.session import get_session
from remind_service.integrations.events import CancellationPublisher, RedisStreamPublisher
from remind_service.integrations.redis import get_redis
from remind_service.services.reminds import RemindService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


async def get_redis_client() -> Redis:
    return await get_redis()


async def get_cancellation_publisher(redis: Redis = Depends(get_redis_client)) -> CancellationPublisher | None:
    if not get_settings().events_enabled:
        return None
    return RedisStreamPublisher(redis)


async def get_remind_service(
    session: AsyncSession = Depends(get_db_session),
    publisher: CancellationPublisher | None = Depends(get_cancellation_publisher),
) -> RemindService:
    return RemindService(session, publisher=publisher)
