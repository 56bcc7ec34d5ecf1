from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from remind_service.domain.remind import Remind


class DeviceInput(BaseModel):
    device_id: str = ""
    delivery_token: str = ""


class RemindCreate(BaseModel):
    times: list[datetime]
    user_id: str
    devices: list[DeviceInput]
    task_id: str
    task_type: str


class ThrottledUpdate(BaseModel):
    throttled: bool


class RemindCancel(BaseModel):
    task_id: str
    user_id: str


class DeviceOutput(BaseModel):
    device_id: str
    delivery_token: str


class RemindOutput(BaseModel):
    id: str
    time: datetime
    user_id: str
    devices: list[DeviceOutput]
    task_id: str
    task_type: str
    throttled: bool
    slide_window_width: int = Field(description="Slide window width in seconds (60-600)")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, remind: Remind) -> RemindOutput:
        return cls(
            id=str(remind.id),
            time=remind.time,
            user_id=str(remind.user_id),
            devices=[DeviceOutput(device_id=d.device_id, delivery_token=d.delivery_token) for d in remind.devices],
            task_id=str(remind.task_id),
            task_type=remind.task_type.value,
            throttled=remind.throttled,
            slide_window_width=remind.slide_window_width.seconds,
            created_at=remind.created_at,
            updated_at=remind.updated_at,
        )


class RemindsOutput(BaseModel):
    reminds: list[RemindOutput]
    count: int

    @classmethod
    def from_entities(cls, reminds) -> RemindsOutput:
        items = [RemindOutput.from_entity(remind) for remind in reminds]
        return cls(reminds=items, count=len(items))


class RemindCancelledEvent(BaseModel):
    task_id: str
    user_id: str
    deleted_count: int
    deleted_ids: list[str]
    cancelled_at: datetime
