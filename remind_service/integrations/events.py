from __future__ import annotations

import logging
from typing import Protocol

from redis.asyncio import Redis

from remind_service.core.config import get_settings
from remind_service.schemas.remind import RemindCancelledEvent

logger = logging.getLogger(__name__)

EVENT_TYPE_REMIND_CANCELLED = "remind.cancelled"


class CancellationPublisher(Protocol):
    async def publish_cancellation(self, event: RemindCancelledEvent) -> None: ...


class RedisStreamPublisher:
    """Appends remind events to a Redis stream for downstream consumers."""

    def __init__(self, redis: Redis, stream: str | None = None, maxlen: int | None = None) -> None:
        settings = get_settings()
        self.redis = redis
        self.stream = stream or settings.remind_cancelled_stream
        self.maxlen = maxlen or settings.remind_cancelled_stream_maxlen

    async def publish_cancellation(self, event: RemindCancelledEvent) -> None:
        fields = {
            "event_type": EVENT_TYPE_REMIND_CANCELLED,
            "task_id": event.task_id,
            "user_id": event.user_id,
            "payload": event.model_dump_json(),
        }
        message_id = await self.redis.xadd(self.stream, fields, maxlen=self.maxlen, approximate=True)
        logger.debug(
            "Published remind cancelled event",
            extra={"stream": self.stream, "task_id": event.task_id, "message_id": message_id},
        )
