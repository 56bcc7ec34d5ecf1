from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from remind_service.domain.errors import SlideWindowWidthTooLargeError, SlideWindowWidthTooSmallError

MIN_SLIDE_WINDOW_WIDTH = timedelta(minutes=1)
MAX_SLIDE_WINDOW_WIDTH = timedelta(minutes=10)


@dataclass(frozen=True, slots=True, order=True)
class SlideWindowWidth:
    """Tolerance around a remind time within which delivery still counts as on time."""

    duration: timedelta

    def __post_init__(self) -> None:
        if self.duration < MIN_SLIDE_WINDOW_WIDTH:
            raise SlideWindowWidthTooSmallError()
        if self.duration > MAX_SLIDE_WINDOW_WIDTH:
            raise SlideWindowWidthTooLargeError()

    @classmethod
    def from_seconds(cls, seconds: int) -> SlideWindowWidth:
        return cls(timedelta(seconds=seconds))

    @property
    def seconds(self) -> int:
        return int(self.duration.total_seconds())
