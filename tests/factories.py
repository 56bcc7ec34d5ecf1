from __future__ import annotations

import os
import time as _time
import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from remind_service.core.enums import TaskType
from remind_service.domain import Device, Devices, Remind, RemindID, SlideWindowWidth, TaskID, TimeRange, UserID
from remind_service.domain.errors import DuplicateRemindError, RemindNotFoundError
from remind_service.schemas.remind import DeviceInput, RemindCancelledEvent


def new_uuid7() -> uuid.UUID:
    # Layout per RFC 9562: 48-bit ms timestamp, version 7, variant 10, random tail.
    timestamp_ms = int(_time.time() * 1000) & ((1 << 48) - 1)
    rand = int.from_bytes(os.urandom(10), "big")
    value = timestamp_ms << 80
    value |= 0x7 << 76
    value |= ((rand >> 62) & 0xFFF) << 64
    value |= 0b10 << 62
    value |= rand & ((1 << 62) - 1)
    return uuid.UUID(int=value)


def user_id_str() -> str:
    return str(new_uuid7())


def task_id_str() -> str:
    return str(new_uuid7())


def future(minutes: int = 60) -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0) + timedelta(minutes=minutes)


def device_inputs(count: int = 1) -> list[DeviceInput]:
    return [DeviceInput(device_id=f"device-{index}", delivery_token=f"token-{index}") for index in range(count)]


def make_devices(count: int = 1) -> Devices:
    return Devices.of(Device(f"device-{index}", f"token-{index}") for index in range(count))


def make_remind(
    time: datetime | None = None,
    task_id: TaskID | None = None,
    task_type: TaskType = TaskType.NEAR,
    throttled: bool = False,
    device_count: int = 1,
) -> Remind:
    created_at = datetime.now(timezone.utc) - timedelta(hours=1)
    return Remind(
        id=RemindID.new(),
        time=time or future(),
        user_id=UserID(new_uuid7()),
        devices=make_devices(device_count),
        task_id=task_id or TaskID(new_uuid7()),
        task_type=task_type,
        slide_window_width=SlideWindowWidth(timedelta(minutes=5)),
        throttled=throttled,
        created_at=created_at,
        updated_at=created_at,
    )


class InMemoryRemindRepository:
    """Dict-backed store with the same transaction contract as the SQL one."""

    def __init__(self, fail_on_save: int | None = None) -> None:
        self.rows: dict[uuid.UUID, Remind] = {}
        self.fail_on_save = fail_on_save
        self.save_calls = 0
        self.update_calls = 0
        self._staged: dict[uuid.UUID, Remind] | None = None

    @property
    def _target(self) -> dict[uuid.UUID, Remind]:
        return self._staged if self._staged is not None else self.rows

    async def save(self, remind: Remind) -> None:
        self.save_calls += 1
        if self.fail_on_save is not None and self.save_calls == self.fail_on_save:
            raise RuntimeError("forced save failure")
        if any(row.task_id == remind.task_id and row.time == remind.time for row in self._target.values()):
            raise DuplicateRemindError("duplicate (task_id, time)")
        self._target[remind.id.value] = replace(remind)

    async def find_by_id(self, remind_id: RemindID) -> Remind:
        row = self._target.get(remind_id.value)
        if row is None:
            raise RemindNotFoundError()
        return replace(row)

    async def find_by_task_id(self, task_id: TaskID) -> list[Remind]:
        rows = [replace(row) for row in self._target.values() if row.task_id == task_id]
        return sorted(rows, key=lambda row: row.time)

    async def find_by_time_range(self, time_range: TimeRange) -> list[Remind]:
        rows = [replace(row) for row in self._target.values() if time_range.start <= row.time <= time_range.end]
        return sorted(rows, key=lambda row: row.time)

    async def update(self, remind: Remind) -> None:
        self.update_calls += 1
        if remind.id.value not in self._target:
            raise RemindNotFoundError()
        self._target[remind.id.value] = replace(remind)

    async def delete(self, remind_id: RemindID) -> None:
        if self._target.pop(remind_id.value, None) is None:
            raise RemindNotFoundError()

    async def delete_by_task_id(self, task_id: TaskID) -> list[RemindID]:
        ids = [row.id for row in self._target.values() if row.task_id == task_id]
        for remind_id in ids:
            del self._target[remind_id.value]
        return ids

    async def with_transaction(self, fn):
        self._staged = dict(self.rows)
        try:
            result = await fn(self)
        except BaseException:
            self._staged = None
            raise
        self.rows, self._staged = self._staged, None
        return result


class FakePublisher:
    def __init__(self, error: Exception | None = None) -> None:
        self.events: list[RemindCancelledEvent] = []
        self.error = error

    async def publish_cancellation(self, event: RemindCancelledEvent) -> None:
        self.events.append(event)
        if self.error is not None:
            raise self.error
