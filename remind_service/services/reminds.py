from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from remind_service.core.clock import ensure_utc, utc_now
from remind_service.core.config import Settings, get_settings
from remind_service.core.exceptions import InternalError, NotFoundError, ValidationAppError
from remind_service.domain import (
    Device,
    Devices,
    Remind,
    RemindID,
    RemindRepositoryProtocol,
    TaskID,
    TimeRange,
    UserID,
    parse_task_type,
)
from remind_service.domain.errors import (
    DomainError,
    DuplicateRemindError,
    DuplicateRemindTimeError,
    InvalidTimeRangeError,
    RemindNotFoundError,
)
from remind_service.integrations.events import CancellationPublisher
from remind_service.repositories.remind import RemindRepository
from remind_service.schemas.remind import DeviceInput, RemindCancelledEvent, RemindOutput, RemindsOutput
from remind_service.services.slide_window import calculate_slide_window_widths

logger = logging.getLogger(__name__)


class RemindService:
    def __init__(
        self,
        session: AsyncSession | None,
        publisher: CancellationPublisher | None = None,
        repository: RemindRepositoryProtocol | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.session = session
        self.publisher = publisher
        self.settings = settings or get_settings()
        self.reminds: RemindRepositoryProtocol = repository if repository is not None else RemindRepository(session)

    async def create_reminds(
        self,
        times: Sequence[datetime],
        user_id: str,
        devices: Sequence[DeviceInput],
        task_id: str,
        task_type: str,
    ) -> RemindsOutput:
        logger.debug("Creating reminds", extra={"task_id": task_id, "user_id": user_id, "times_count": len(times)})

        if not times:
            raise ValidationAppError("times", "at least one time is required")

        try:
            parsed_user_id = UserID.parse(user_id)
        except DomainError as exc:
            raise ValidationAppError("user_id", str(exc)) from exc

        try:
            parsed_task_id = TaskID.parse(task_id)
        except DomainError as exc:
            raise ValidationAppError("task_id", str(exc)) from exc

        try:
            existing = await self.reminds.find_by_task_id(parsed_task_id)
        except Exception as exc:
            logger.exception("Failed to check existing reminds", extra={"task_id": task_id})
            raise InternalError() from exc

        if existing:
            # The first batch stored for a task stays authoritative.
            logger.info("Returning existing reminds (idempotency)", extra={"task_id": task_id, "count": len(existing)})
            return RemindsOutput.from_entities(existing)

        device_collection = self._parse_devices(devices)

        try:
            parsed_task_type = parse_task_type(task_type)
        except DomainError as exc:
            raise ValidationAppError("task_type", str(exc)) from exc

        normalized_times = [ensure_utc(value) for value in times]
        seen: set[datetime] = set()
        for index, value in enumerate(normalized_times):
            if value in seen:
                raise ValidationAppError(f"times[{index}]", str(DuplicateRemindTimeError()))
            seen.add(value)

        widths = calculate_slide_window_widths(normalized_times, parsed_task_type)
        now = utc_now()
        reminds: list[Remind] = []
        for index, (value, width) in enumerate(zip(normalized_times, widths)):
            try:
                remind = Remind.create(
                    time=value,
                    user_id=parsed_user_id,
                    devices=device_collection,
                    task_id=parsed_task_id,
                    task_type=parsed_task_type,
                    slide_window_width=width,
                    now=now,
                )
            except DomainError as exc:
                raise ValidationAppError(f"times[{index}]", str(exc)) from exc
            reminds.append(remind)

        async def save_all(repository) -> None:
            for remind in reminds:
                await repository.save(remind)

        try:
            await self.reminds.with_transaction(save_all)
        except DuplicateRemindError as exc:
            # Lost a race against a concurrent first-time create for the same task.
            logger.error("Concurrent remind batch for task", extra={"task_id": task_id, "error": str(exc)})
            raise InternalError() from exc
        except Exception as exc:
            logger.exception("Failed to save reminds", extra={"task_id": task_id, "count": len(reminds)})
            raise InternalError() from exc

        logger.info("Reminds created", extra={"task_id": task_id, "count": len(reminds)})
        # Same ordering as the idempotent replay, which reads back by time.
        return RemindsOutput.from_entities(sorted(reminds, key=lambda remind: remind.time))

    async def list_reminds_by_time_range(self, start: datetime, end: datetime) -> RemindsOutput:
        logger.debug("Listing reminds by time range", extra={"start": start.isoformat(), "end": end.isoformat()})

        try:
            time_range = TimeRange(start=ensure_utc(start), end=ensure_utc(end))
        except InvalidTimeRangeError as exc:
            raise ValidationAppError("time_range", str(exc)) from exc

        try:
            reminds = await self.reminds.find_by_time_range(time_range)
        except Exception as exc:
            logger.exception(
                "Failed to list reminds by time range",
                extra={"start": start.isoformat(), "end": end.isoformat()},
            )
            raise InternalError() from exc

        return RemindsOutput.from_entities(reminds)

    async def update_throttled(self, remind_id: str, throttled: bool) -> RemindOutput:
        logger.debug("Updating throttled state", extra={"remind_id": remind_id, "throttled": throttled})

        parsed_id = self._parse_remind_id(remind_id)

        try:
            remind = await self.reminds.find_by_id(parsed_id)
        except RemindNotFoundError as exc:
            logger.warning("Remind not found for throttled update", extra={"remind_id": remind_id})
            raise NotFoundError("Remind not found") from exc
        except Exception as exc:
            logger.exception("Failed to load remind", extra={"remind_id": remind_id})
            raise InternalError() from exc

        # The latch is one-way: throttled=False never clears it.
        if throttled and not remind.mark_as_throttled():
            logger.info("Remind already throttled (idempotency)", extra={"remind_id": remind_id})

        try:
            await self.reminds.update(remind)
        except RemindNotFoundError as exc:
            logger.warning("Remind vanished before throttled update", extra={"remind_id": remind_id})
            raise NotFoundError("Remind not found") from exc
        except Exception as exc:
            logger.exception("Failed to update throttled state", extra={"remind_id": remind_id})
            raise InternalError() from exc

        return RemindOutput.from_entity(remind)

    async def delete_remind(self, remind_id: str) -> None:
        logger.debug("Deleting remind", extra={"remind_id": remind_id})

        parsed_id = self._parse_remind_id(remind_id)

        try:
            await self.reminds.delete(parsed_id)
        except RemindNotFoundError:
            logger.info("Remind not found for deletion (idempotency)", extra={"remind_id": remind_id})
        except Exception as exc:
            logger.exception("Failed to delete remind", extra={"remind_id": remind_id})
            raise InternalError() from exc

    async def cancel_reminds_by_task_id(self, task_id: str, user_id: str) -> None:
        logger.debug("Cancelling reminds by task", extra={"task_id": task_id, "user_id": user_id})

        try:
            parsed_task_id = TaskID.parse(task_id)
        except DomainError as exc:
            raise ValidationAppError("task_id", str(exc)) from exc

        try:
            UserID.parse(user_id)
        except DomainError as exc:
            raise ValidationAppError("user_id", str(exc)) from exc

        try:
            deleted_ids = await self.reminds.delete_by_task_id(parsed_task_id)
        except Exception as exc:
            logger.exception("Failed to cancel reminds by task", extra={"task_id": task_id, "user_id": user_id})
            raise InternalError() from exc

        if deleted_ids and self.publisher is not None:
            event = RemindCancelledEvent(
                task_id=task_id,
                user_id=user_id,
                deleted_count=len(deleted_ids),
                deleted_ids=[str(value) for value in deleted_ids],
                cancelled_at=utc_now(),
            )
            await self._publish_cancellation(event)

        logger.info(
            "Reminds cancelled by task",
            extra={"task_id": task_id, "user_id": user_id, "deleted_count": len(deleted_ids)},
        )

    async def _publish_cancellation(self, event: RemindCancelledEvent) -> None:
        # Publish failures are logged only; the rows are already deleted.
        try:
            await asyncio.wait_for(
                self.publisher.publish_cancellation(event),
                timeout=self.settings.event_publish_timeout_sec,
            )
        except Exception:
            logger.exception("Failed to publish remind cancelled event", extra={"task_id": event.task_id})

    @staticmethod
    def _parse_remind_id(remind_id: str) -> RemindID:
        try:
            return RemindID.parse(remind_id)
        except DomainError as exc:
            raise ValidationAppError("id", str(exc)) from exc

    @staticmethod
    def _parse_devices(devices: Sequence[DeviceInput]) -> Devices:
        parsed: list[Device] = []
        for index, item in enumerate(devices):
            try:
                parsed.append(Device(item.device_id, item.delivery_token))
            except DomainError as exc:
                raise ValidationAppError(f"devices[{index}]", str(exc)) from exc

        try:
            return Devices.of(parsed)
        except DomainError as exc:
            raise ValidationAppError("devices", str(exc)) from exc
