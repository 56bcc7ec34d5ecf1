from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from remind_service.core.enums import TaskType
from remind_service.db.base import Base
from remind_service.db.types import DevicesJSON, TaskTypeEnum
from remind_service.models.mixins import TimestampMixin


class RemindRecord(Base, TimestampMixin):
    __tablename__ = "reminds"
    __table_args__ = (
        UniqueConstraint("task_id", "time", name="uq_reminds_task_id_time"),
        CheckConstraint("slide_window_width BETWEEN 60 AND 600", name="ck_reminds_slide_window_width"),
        Index("ix_reminds_time", "time"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)
    devices: Mapped[list[dict[str, str]]] = mapped_column(DevicesJSON, nullable=False)
    task_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)
    task_type: Mapped[TaskType] = mapped_column(TaskTypeEnum, nullable=False)
    throttled: Mapped[bool] = mapped_column(default=False, index=True, nullable=False)
    # stored as whole seconds
    slide_window_width: Mapped[int] = mapped_column(Integer, nullable=False)
