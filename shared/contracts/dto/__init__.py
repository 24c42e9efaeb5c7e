from .project import ProjectCreate, ProjectDTO, ProjectStatus, ProjectUpdate
from .task import TaskDTO, TaskPriority, TaskStatus

__all__ = [
    "ProjectCreate",
    "ProjectDTO",
    "ProjectStatus",
    "ProjectUpdate",
    "TaskDTO",
    "TaskPriority",
    "TaskStatus",
]
