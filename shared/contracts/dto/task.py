from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from shared.contracts.base import CalendarDate


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    DONE = "done"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskDTO(BaseModel):
    """Task row.

    Only `title` and `status` are guaranteed: callers may select a
    subset of columns.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    project_id: str | None = None
    title: str
    status: TaskStatus
    priority: TaskPriority | None = None
    assigned_to: str | None = None
    due_date: CalendarDate | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
