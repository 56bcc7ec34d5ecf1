from enum import Enum


class TaskType(str, Enum):
    SHORT = "short"
    NEAR = "near"
    RELAXED = "relaxed"
    SCHEDULED = "scheduled"
