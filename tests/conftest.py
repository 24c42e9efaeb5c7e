"""Shared fixtures for assistant tests."""

from datetime import UTC, datetime, timedelta
import re
from typing import Any
import uuid

import pytest

from teamsync_assistant.clients.store import Filter, Order
from teamsync_assistant.config import Settings
from teamsync_assistant.interpreter import Assistant

EPOCH = datetime(2026, 1, 1, tzinfo=UTC)


def like_to_regex(pattern: str) -> re.Pattern:
    """Translate a LIKE pattern (backslash escapes) into a regex."""
    parts = []
    chars = iter(pattern)
    for ch in chars:
        if ch == "\\":
            parts.append(re.escape(next(chars, "\\")))
        elif ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def _matches(row: dict[str, Any], f: Filter) -> bool:
    value = row.get(f.column)
    if value is None:
        # SQL NULL never satisfies a comparison
        return False
    if f.op == "eq":
        return str(value) == str(f.value)
    if f.op == "neq":
        return str(value) != str(f.value)
    if f.op == "lt":
        return str(value) < str(f.value)
    if f.op == "lte":
        return str(value) <= str(f.value)
    if f.op == "gt":
        return str(value) > str(f.value)
    if f.op == "gte":
        return str(value) >= str(f.value)
    if f.op == "ilike":
        return bool(like_to_regex(str(f.value)).fullmatch(str(value)))
    raise NotImplementedError(f.op)


class FakeStore:
    """In-memory data store with PostgREST filter semantics."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {"projects": [], "tasks": []}
        self.calls: list[tuple[str, str]] = []
        self.rows_written = 0
        self._seq = 0

    def _tick(self) -> str:
        self._seq += 1
        return (EPOCH + timedelta(seconds=self._seq)).isoformat()

    def add_project(self, title: str, **fields: Any) -> dict[str, Any]:
        stamp = self._tick()
        row = {
            "id": uuid.uuid4().hex,
            "title": title,
            "description": None,
            "status": "planning",
            "progress": 0,
            "manager_id": None,
            "deadline": None,
            "created_at": stamp,
            "updated_at": stamp,
            **fields,
        }
        self.tables["projects"].append(row)
        return row

    def add_task(self, title: str, **fields: Any) -> dict[str, Any]:
        row = {
            "id": uuid.uuid4().hex,
            "title": title,
            "status": "todo",
            "priority": "medium",
            "due_date": None,
            **fields,
        }
        self.tables["tasks"].append(row)
        return row

    async def query(
        self,
        table: str,
        filters: list[Filter] | None = None,
        order: Order | None = None,
        limit: int | None = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        self.calls.append(("query", table))
        rows = [r for r in self.tables[table] if all(_matches(r, f) for f in filters or [])]
        if order is not None:
            present = [r for r in rows if r.get(order.column) is not None]
            missing = [r for r in rows if r.get(order.column) is None]
            present.sort(key=lambda r: r[order.column], reverse=not order.ascending)
            rows = present + missing
        if limit is not None:
            rows = rows[:limit]
        if columns != "*":
            wanted = columns.split(",")
            rows = [{k: r.get(k) for k in wanted} for r in rows]
        return [dict(r) for r in rows]

    async def insert(self, table: str, record: dict[str, Any]) -> str:
        self.calls.append(("insert", table))
        stamp = self._tick()
        row = {"id": uuid.uuid4().hex, "created_at": stamp, "updated_at": stamp, **record}
        self.tables[table].append(row)
        self.rows_written += 1
        return row["id"]

    async def update(self, table: str, filters: list[Filter], patch: dict[str, Any]) -> int:
        self.calls.append(("update", table))
        matched = [r for r in self.tables[table] if all(_matches(r, f) for f in filters)]
        for row in matched:
            row.update(patch)
            row["updated_at"] = self._tick()
        self.rows_written += len(matched)
        return len(matched)

    @property
    def data_calls(self) -> int:
        return len(self.calls)

    def project(self, title: str) -> dict[str, Any]:
        return next(r for r in self.tables["projects"] if r["title"] == title)


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        supabase_url="https://teamsync.supabase.co",
        supabase_key="anon-key",
        user_id="user-1",
        request_timeout=1.0,
    )


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def assistant(store, settings, clock):
    return Assistant(store, settings, clock=clock)


@pytest.fixture
def session(assistant):
    return assistant.new_session()


@pytest.fixture
def send(assistant, session, clock):
    """Submit a message, stepping the clock past the rate gate first."""

    async def _send(text: str):
        clock.advance(2.0)
        return await assistant.submit(session, text)

    return _send
