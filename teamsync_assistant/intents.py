"""Command grammar for the assistant.

The assistant understands a small, fixed command set rather than free
language. Matching is ordered and the first rule that applies wins:

    help                      exact
    list projects             prefix
    create project ...        prefix, optional "due YYYY-MM-DD"
    set status ... to ...     regex, strict status enum
    set progress ... to N     regex, numeric value required
    ... overdue ... tasks ... substring test

Arguments keep the user's casing; only the matching is case-insensitive.
"""

from dataclasses import dataclass
from datetime import date
import re

from shared.contracts.dto import ProjectStatus


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class ListProjects:
    pass


@dataclass(frozen=True)
class CreateProject:
    title: str
    deadline: date | None = None


@dataclass(frozen=True)
class SetStatus:
    title: str
    status: ProjectStatus


@dataclass(frozen=True)
class SetProgress:
    title: str
    value: float


@dataclass(frozen=True)
class OverdueTasks:
    pass


@dataclass(frozen=True)
class Unrecognized:
    # Usage hint for a near miss; None means show the full help
    hint: str | None = None


Intent = Help | ListProjects | CreateProject | SetStatus | SetProgress | OverdueTasks | Unrecognized

_STATUS_CHOICES = "|".join(s.value for s in ProjectStatus)


@dataclass(frozen=True)
class Command:
    usage: str
    intent: type


COMMANDS: tuple[Command, ...] = (
    Command("list projects", ListProjects),
    Command("create project <title> [due YYYY-MM-DD]", CreateProject),
    Command(f"set status <project title> to <{_STATUS_CHOICES}>", SetStatus),
    Command("set progress <project title> to <0-100>", SetProgress),
    Command("overdue tasks", OverdueTasks),
    Command("help", Help),
)

HELP_TEXT = "I can help with:\n" + "\n".join(f"• {c.usage}" for c in COMMANDS)
NOT_UNDERSTOOD = f"I didn't understand.\n{HELP_TEXT}"

SET_STATUS_HINT = f"Try: set status <project title> to <{_STATUS_CHOICES}>"
SET_PROGRESS_HINT = "Try: set progress <project title> to <0-100>"

_CREATE_PREFIX = re.compile(r"^create\s+project\s*", re.IGNORECASE)
_DUE_CLAUSE = re.compile(r"\s+due\s+(\d{4}-\d{2}-\d{2}).*$", re.IGNORECASE)
_SET_STATUS = re.compile(
    rf"^set\s+status\s+(?P<title>.+)\s+to\s+(?P<status>{_STATUS_CHOICES})$",
    re.IGNORECASE,
)
_SET_PROGRESS = re.compile(
    r"^set\s+progress\s+(?P<title>.+)\s+to\s+(?P<value>[-+]?\d+(?:\.\d+)?)\s*%?$",
    re.IGNORECASE,
)


def _unquote(title: str) -> str:
    title = title.strip()
    if len(title) >= 2 and title[0] == title[-1] and title[0] in "\"'":  # noqa: PLR2004
        return title[1:-1].strip()
    return title


def _parse_deadline(raw: str) -> date | None:
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None


def parse_create(text: str) -> CreateProject:
    deadline = None
    due = _DUE_CLAUSE.search(text)
    if due:
        deadline = _parse_deadline(due.group(1))
        text = text[: due.start()]
    title = _CREATE_PREFIX.sub("", text, count=1)
    return CreateProject(title=_unquote(title), deadline=deadline)


def parse_intent(text: str) -> Intent:
    """Classify one guard-approved message."""
    q = text.strip()
    lower = q.lower()

    if lower == "help":
        return Help()
    if lower.startswith("list projects"):
        return ListProjects()
    if lower.startswith("create project"):
        return parse_create(q)
    if lower.startswith("set status"):
        m = _SET_STATUS.match(q)
        if not m:
            return Unrecognized(hint=SET_STATUS_HINT)
        return SetStatus(
            title=_unquote(m.group("title")),
            status=ProjectStatus(m.group("status").lower()),
        )
    if lower.startswith("set progress"):
        m = _SET_PROGRESS.match(q)
        if not m:
            return Unrecognized(hint=SET_PROGRESS_HINT)
        return SetProgress(title=_unquote(m.group("title")), value=float(m.group("value")))
    if "overdue" in lower and "tasks" in lower:
        return OverdueTasks()
    return Unrecognized()
