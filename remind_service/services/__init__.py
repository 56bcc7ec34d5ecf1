from remind_service.services.reminds import RemindService

__all__ = [
    "RemindService",
]
