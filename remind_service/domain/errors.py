from __future__ import annotations


class DomainError(ValueError):
    """Invariant violation on a domain value or entity."""

    message = "invalid domain value"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class InvalidRemindIDError(DomainError):
    message = "invalid remind ID"


class InvalidUserIDError(DomainError):
    message = "invalid user ID: must be valid UUIDv7"


class InvalidTaskIDError(DomainError):
    message = "invalid task ID: must be valid UUIDv7"


class EmptyDeviceIDError(DomainError):
    message = "device ID cannot be empty"


class EmptyDeliveryTokenError(DomainError):
    message = "delivery token cannot be empty"


class EmptyDevicesError(DomainError):
    message = "at least one device is required"


class InvalidTaskTypeError(DomainError):
    message = "invalid task type"


class SlideWindowWidthTooSmallError(DomainError):
    message = "slide window width must be at least 1 minute"


class SlideWindowWidthTooLargeError(DomainError):
    message = "slide window width must not exceed 10 minutes"


class PastRemindTimeError(DomainError):
    message = "remind time cannot be in the past"


class DuplicateRemindTimeError(DomainError):
    message = "duplicate remind time"


class InvalidTimeRangeError(DomainError):
    message = "invalid time range: start must be before end"


class RemindNotFoundError(LookupError):
    def __init__(self, message: str = "remind not found") -> None:
        super().__init__(message)


class DuplicateRemindError(Exception):
    """A remind with the same (task_id, time) already exists in the store."""
