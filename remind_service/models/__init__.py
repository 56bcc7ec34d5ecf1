from remind_service.models.remind import RemindRecord

__all__ = [
    "RemindRecord",
]
