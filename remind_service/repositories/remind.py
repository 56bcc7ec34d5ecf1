from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from remind_service.core.clock import ensure_utc
from remind_service.domain import Device, Devices, Remind, RemindID, SlideWindowWidth, TaskID, TimeRange, UserID
from remind_service.domain.errors import DuplicateRemindError, RemindNotFoundError
from remind_service.models import RemindRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


def to_entity(record: RemindRecord) -> Remind:
    return Remind(
        id=RemindID(record.id),
        time=ensure_utc(record.time),
        user_id=UserID(record.user_id),
        devices=Devices.of(Device(item["device_id"], item["delivery_token"]) for item in record.devices),
        task_id=TaskID(record.task_id),
        task_type=record.task_type,
        slide_window_width=SlideWindowWidth.from_seconds(record.slide_window_width),
        throttled=record.throttled,
        created_at=ensure_utc(record.created_at),
        updated_at=ensure_utc(record.updated_at),
    )


def to_record(remind: Remind) -> RemindRecord:
    return RemindRecord(
        id=remind.id.value,
        time=remind.time,
        user_id=remind.user_id.value,
        devices=remind.devices.to_list(),
        task_id=remind.task_id.value,
        task_type=remind.task_type,
        throttled=remind.throttled,
        slide_window_width=remind.slide_window_width.seconds,
        created_at=remind.created_at,
        updated_at=remind.updated_at,
    )


class RemindRepository:
    """SQLAlchemy store for reminds.

    Writes commit on their own unless the repository was handed out by
    :meth:`with_transaction`, in which case they only flush and the enclosing
    transaction decides.
    """

    def __init__(self, session: AsyncSession, in_transaction: bool = False) -> None:
        self.session = session
        self.in_transaction = in_transaction

    async def _write(self) -> None:
        if self.in_transaction:
            await self.session.flush()
            return
        try:
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise

    async def save(self, remind: Remind) -> None:
        self.session.add(to_record(remind))
        try:
            await self._write()
        except IntegrityError as exc:
            logger.warning(
                "Remind conflicts with an existing row",
                extra={"remind_id": str(remind.id), "task_id": str(remind.task_id)},
            )
            raise DuplicateRemindError(f"remind for task {remind.task_id} at {remind.time.isoformat()} already exists") from exc

    async def find_by_id(self, remind_id: RemindID) -> Remind:
        stmt = select(RemindRecord).where(RemindRecord.id == remind_id.value).execution_options(populate_existing=True)
        record = await self.session.scalar(stmt)
        if record is None:
            raise RemindNotFoundError()
        return to_entity(record)

    async def find_by_task_id(self, task_id: TaskID) -> Sequence[Remind]:
        stmt = (
            select(RemindRecord)
            .where(RemindRecord.task_id == task_id.value)
            .order_by(RemindRecord.time.asc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.scalars(stmt)
        return [to_entity(record) for record in result.all()]

    async def find_by_time_range(self, time_range: TimeRange) -> Sequence[Remind]:
        stmt = (
            select(RemindRecord)
            .where(
                RemindRecord.time >= ensure_utc(time_range.start),
                RemindRecord.time <= ensure_utc(time_range.end),
            )
            .order_by(RemindRecord.time.asc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.scalars(stmt)
        return [to_entity(record) for record in result.all()]

    async def update(self, remind: Remind) -> None:
        stmt = (
            update(RemindRecord)
            .where(RemindRecord.id == remind.id.value)
            .values(throttled=remind.throttled, updated_at=remind.updated_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self._write()
        if result.rowcount == 0:
            raise RemindNotFoundError()

    async def delete(self, remind_id: RemindID) -> None:
        stmt = delete(RemindRecord).where(RemindRecord.id == remind_id.value).execution_options(synchronize_session=False)
        result = await self.session.execute(stmt)
        await self._write()
        if result.rowcount == 0:
            raise RemindNotFoundError()

    async def delete_by_task_id(self, task_id: TaskID) -> list[RemindID]:
        stmt = select(RemindRecord.id).where(RemindRecord.task_id == task_id.value)
        ids = [RemindID(value) for value in (await self.session.scalars(stmt)).all()]
        if not ids:
            return []

        await self.session.execute(
            delete(RemindRecord)
            .where(RemindRecord.task_id == task_id.value)
            .execution_options(synchronize_session=False)
        )
        await self._write()
        logger.debug("Reminds deleted by task", extra={"task_id": str(task_id), "count": len(ids)})
        return ids

    async def with_transaction(self, fn: Callable[[RemindRepository], Awaitable[T]]) -> T:
        if self.in_transaction:
            return await fn(self)

        tx_repository = type(self)(self.session, in_transaction=True)
        try:
            result = await fn(tx_repository)
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            logger.warning("Remind transaction rolled back")
            raise
        return result
