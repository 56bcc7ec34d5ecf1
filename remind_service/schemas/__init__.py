from remind_service.schemas.remind import (
    DeviceInput,
    DeviceOutput,
    RemindCancel,
    RemindCancelledEvent,
    RemindCreate,
    RemindOutput,
    RemindsOutput,
    ThrottledUpdate,
)

__all__ = [
    "DeviceInput",
    "DeviceOutput",
    "RemindCancel",
    "RemindCancelledEvent",
    "RemindCreate",
    "RemindOutput",
    "RemindsOutput",
    "ThrottledUpdate",
]
