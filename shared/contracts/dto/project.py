from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from shared.contracts.base import CalendarDate


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"


class ProjectCreate(BaseModel):
    """Insert payload for the projects table."""

    title: str = Field(..., min_length=1)
    description: str | None = None
    status: ProjectStatus = ProjectStatus.PLANNING
    progress: int = Field(default=0, ge=0, le=100)
    manager_id: str | None = None
    deadline: date | None = None


class ProjectUpdate(BaseModel):
    """Patch payload for the projects table; unset fields are left alone."""

    status: ProjectStatus | None = None
    progress: int | None = Field(default=None, ge=0, le=100)


class ProjectDTO(BaseModel):
    """Project row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str | None = None
    status: ProjectStatus
    progress: int = 0
    manager_id: str | None = None
    deadline: CalendarDate | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
