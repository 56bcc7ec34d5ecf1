from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from remind_service.core.clock import ensure_utc, utc_now
from remind_service.core.enums import TaskType
from remind_service.domain.device import Devices
from remind_service.domain.errors import InvalidTaskTypeError, PastRemindTimeError
from remind_service.domain.identifiers import RemindID, TaskID, UserID
from remind_service.domain.slide_window import SlideWindowWidth

# Clock skew allowance for the past-time check.
PAST_TIME_TOLERANCE = timedelta(minutes=1)


def parse_task_type(raw: str | TaskType) -> TaskType:
    try:
        return TaskType(raw)
    except ValueError as exc:
        raise InvalidTaskTypeError(f"invalid task type: {raw}") from exc


@dataclass(slots=True)
class Remind:
    """Aggregate root for a single remind.

    Only the throttle latch mutates after creation. Use :meth:`create` for new
    reminds; the plain constructor reconstitutes persisted ones without
    re-checking the creation-time invariants.
    """

    id: RemindID
    time: datetime
    user_id: UserID
    devices: Devices
    task_id: TaskID
    task_type: TaskType
    slide_window_width: SlideWindowWidth
    throttled: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(
        cls,
        time: datetime,
        user_id: UserID,
        devices: Devices,
        task_id: TaskID,
        task_type: TaskType,
        slide_window_width: SlideWindowWidth,
        now: datetime | None = None,
    ) -> Remind:
        now = ensure_utc(now) if now is not None else utc_now()
        time = ensure_utc(time)
        if time < now - PAST_TIME_TOLERANCE:
            raise PastRemindTimeError()

        return cls(
            id=RemindID.new(),
            time=time,
            user_id=user_id,
            devices=devices,
            task_id=task_id,
            task_type=task_type,
            slide_window_width=slide_window_width,
            throttled=False,
            created_at=now,
            updated_at=now,
        )

    def mark_as_throttled(self, now: datetime | None = None) -> bool:
        """Latch the remind into the throttled state.

        Returns False when it was already throttled; that self-loop is allowed.
        """
        if self.throttled:
            return False
        self.throttled = True
        self.updated_at = ensure_utc(now) if now is not None else utc_now()
        return True

    def is_due(self, now: datetime | None = None) -> bool:
        now = ensure_utc(now) if now is not None else utc_now()
        return now > self.time
