from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, TypeVar

from remind_service.domain.errors import InvalidTimeRangeError
from remind_service.domain.identifiers import RemindID, TaskID
from remind_service.domain.remind import Remind

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class TimeRange:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidTimeRangeError()


class RemindRepositoryProtocol(Protocol):
    """Persistence boundary consumed by the remind use cases.

    ``find_by_id``, ``update`` and ``delete`` raise ``RemindNotFoundError``
    when no row matches. ``with_transaction`` commits after ``fn`` returns and
    rolls back on any exception raised from it.
    """

    async def save(self, remind: Remind) -> None: ...

    async def find_by_id(self, remind_id: RemindID) -> Remind: ...

    async def find_by_task_id(self, task_id: TaskID) -> Sequence[Remind]: ...

    async def find_by_time_range(self, time_range: TimeRange) -> Sequence[Remind]: ...

    async def update(self, remind: Remind) -> None: ...

    async def delete(self, remind_id: RemindID) -> None: ...

    async def delete_by_task_id(self, task_id: TaskID) -> list[RemindID]: ...

    async def with_transaction(self, fn: Callable[[RemindRepositoryProtocol], Awaitable[T]]) -> T: ...
