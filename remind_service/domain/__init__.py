from remind_service.domain.device import Device, Devices
from remind_service.domain.identifiers import RemindID, TaskID, UserID
from remind_service.domain.remind import PAST_TIME_TOLERANCE, Remind, parse_task_type
from remind_service.domain.repository import RemindRepositoryProtocol, TimeRange
from remind_service.domain.slide_window import MAX_SLIDE_WINDOW_WIDTH, MIN_SLIDE_WINDOW_WIDTH, SlideWindowWidth

__all__ = [
    "Device",
    "Devices",
    "RemindID",
    "TaskID",
    "UserID",
    "Remind",
    "PAST_TIME_TOLERANCE",
    "parse_task_type",
    "RemindRepositoryProtocol",
    "TimeRange",
    "SlideWindowWidth",
    "MIN_SLIDE_WINDOW_WIDTH",
    "MAX_SLIDE_WINDOW_WIDTH",
]
