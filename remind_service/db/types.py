from __future__ import annotations

from sqlalchemy import JSON
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB

from remind_service.core.enums import TaskType

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests).
DevicesJSON = JSON().with_variant(JSONB(), "postgresql")

# Persists enum values ("short", ...), as created by the initial migration.
TaskTypeEnum = SAEnum(
    TaskType,
    name="task_type",
    values_callable=lambda members: [member.value for member in members],
    validate_strings=True,
)
