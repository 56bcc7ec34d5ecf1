from __future__ import annotations

import uuid
from dataclasses import dataclass

from remind_service.domain.errors import InvalidRemindIDError, InvalidTaskIDError, InvalidUserIDError

REQUIRED_UUID_VERSION = 7


def _parse_uuid(value: str | uuid.UUID) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return None


@dataclass(frozen=True, slots=True)
class RemindID:
    value: uuid.UUID

    @classmethod
    def new(cls) -> RemindID:
        return cls(uuid.uuid4())

    @classmethod
    def parse(cls, raw: str | uuid.UUID) -> RemindID:
        parsed = _parse_uuid(raw)
        if parsed is None:
            raise InvalidRemindIDError()
        return cls(parsed)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class UserID:
    value: uuid.UUID

    def __post_init__(self) -> None:
        if self.value.version != REQUIRED_UUID_VERSION:
            raise InvalidUserIDError()

    @classmethod
    def parse(cls, raw: str | uuid.UUID) -> UserID:
        parsed = _parse_uuid(raw)
        if parsed is None:
            raise InvalidUserIDError()
        return cls(parsed)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class TaskID:
    value: uuid.UUID

    def __post_init__(self) -> None:
        if self.value.version != REQUIRED_UUID_VERSION:
            raise InvalidTaskIDError()

    @classmethod
    def parse(cls, raw: str | uuid.UUID) -> TaskID:
        parsed = _parse_uuid(raw)
        if parsed is None:
            raise InvalidTaskIDError()
        return cls(parsed)

    def __str__(self) -> str:
        return str(self.value)
