"""Action handlers for recognized intents.

Each handler turns one intent into a reply string. Store errors are not
caught here; the interpreter handles them once for every command.
"""

from datetime import UTC, datetime
import math
import re

import structlog

from shared.contracts.base import format_date
from shared.contracts.dto import (
    ProjectCreate,
    ProjectDTO,
    ProjectStatus,
    ProjectUpdate,
    TaskDTO,
    TaskStatus,
)

from .clients.store import DataStore, Filter, Order
from .intents import (
    HELP_TEXT,
    NOT_UNDERSTOOD,
    CreateProject,
    Help,
    Intent,
    ListProjects,
    OverdueTasks,
    SetProgress,
    SetStatus,
    Unrecognized,
)

logger = structlog.get_logger()

PROJECTS_TABLE = "projects"
TASKS_TABLE = "tasks"

MAX_TITLE_LENGTH = 200

NO_PROJECTS = "You have no projects yet."
MISSING_TITLE = "Please provide a project title."
BAD_TITLE_LENGTH = f"Project title must be between 1 and {MAX_TITLE_LENGTH} characters."
NO_OVERDUE_TASKS = "No overdue tasks. Great job!"


def escape_like(value: str) -> str:
    """Escape LIKE metacharacters so the value matches literally."""
    return re.sub(r"([\\%_])", r"\\\1", value)


def clamp_progress(value: float) -> int:
    """Clamp into 0..100, then round half up."""
    return math.floor(max(0.0, min(100.0, value)) + 0.5)


def _format_project_line(project: ProjectDTO) -> str:
    line = f"• {project.title} ({project.status.value}) – {project.progress}%"
    if project.deadline:
        line += f", due {format_date(project.deadline)}"
    return line


def _format_task_line(task: TaskDTO) -> str:
    return f"• {task.title} – due {format_date(task.due_date)} ({task.status.value})"


def _update_reply(count: int, title: str, what: str, value: str) -> str:
    if count == 0:
        return f'No project found matching "{title}".'
    if count > 1:
        return (
            f'Warning: Updated {count} projects matching "{title}". '
            "Consider using more specific titles."
        )
    return f'Updated {what} of "{title}" to {value}.'


class ActionExecutor:
    """Runs intents against the data store for one signed-in user."""

    def __init__(self, store: DataStore, user_id: str | None, list_limit: int = 10) -> None:
        self.store = store
        self.user_id = user_id
        self.list_limit = list_limit

    async def execute(self, intent: Intent) -> str:
        match intent:
            case Help():
                return HELP_TEXT
            case ListProjects():
                return await self.list_projects()
            case CreateProject():
                return await self.create_project(intent)
            case SetStatus():
                return await self.set_status(intent)
            case SetProgress():
                return await self.set_progress(intent)
            case OverdueTasks():
                return await self.overdue_tasks()
            case Unrecognized(hint=hint):
                return hint or NOT_UNDERSTOOD
        raise TypeError(f"Unhandled intent: {intent!r}")

    async def list_projects(self) -> str:
        rows = await self.store.query(
            PROJECTS_TABLE,
            order=Order("updated_at", ascending=False),
            limit=self.list_limit,
        )
        if not rows:
            return NO_PROJECTS
        projects = [ProjectDTO.model_validate(row) for row in rows]
        return "\n".join(_format_project_line(p) for p in projects)

    async def create_project(self, intent: CreateProject) -> str:
        if not intent.title:
            return MISSING_TITLE

        payload = ProjectCreate(
            title=intent.title,
            status=ProjectStatus.PLANNING,
            progress=0,
            manager_id=self.user_id,
            deadline=intent.deadline,
        )
        project_id = await self.store.insert(PROJECTS_TABLE, payload.model_dump(mode="json"))
        logger.info("project_created", project_id=project_id, has_deadline=bool(intent.deadline))

        reply = f'Created project "{intent.title}"'
        if intent.deadline:
            reply += f" (due {format_date(intent.deadline)})"
        return reply + "."

    async def _update_matching(self, title: str, patch: ProjectUpdate) -> int:
        """Patch every project whose title contains `title`, ignoring case."""
        pattern = f"%{escape_like(title)}%"
        count = await self.store.update(
            PROJECTS_TABLE,
            [Filter("title", "ilike", pattern)],
            patch.model_dump(mode="json", exclude_none=True),
        )
        if count > 1:
            logger.warning("multiple_projects_updated", count=count, title=title)
        else:
            logger.info("projects_updated", count=count)
        return count

    async def set_status(self, intent: SetStatus) -> str:
        title = intent.title.strip()
        if not 1 <= len(title) <= MAX_TITLE_LENGTH:
            return BAD_TITLE_LENGTH
        count = await self._update_matching(title, ProjectUpdate(status=intent.status))
        return _update_reply(count, title, "status", intent.status.value)

    async def set_progress(self, intent: SetProgress) -> str:
        title = intent.title.strip()
        if not 1 <= len(title) <= MAX_TITLE_LENGTH:
            return BAD_TITLE_LENGTH
        progress = clamp_progress(intent.value)
        count = await self._update_matching(title, ProjectUpdate(progress=progress))
        return _update_reply(count, title, "progress", f"{progress}%")

    async def overdue_tasks(self, now: datetime | None = None) -> str:
        now = now or datetime.now(UTC)
        rows = await self.store.query(
            TASKS_TABLE,
            filters=[
                Filter("status", "neq", TaskStatus.DONE.value),
                Filter("due_date", "lt", now.isoformat()),
            ],
            order=Order("due_date", ascending=True),
            limit=self.list_limit,
            columns="title,due_date,status",
        )
        if not rows:
            return NO_OVERDUE_TASKS
        tasks = [TaskDTO.model_validate(row) for row in rows]
        return "\n".join(_format_task_line(t) for t in tasks)
