from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BeforeValidator


def _to_calendar_date(value: Any) -> Any:
    """Accept both `date` columns and `timestamptz` columns as a date.

    The hosted store returns either `2025-01-31` or a full ISO timestamp
    such as `2025-01-31T00:00:00+00:00` depending on the column type.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10:  # noqa: PLR2004
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return value


CalendarDate = Annotated[date, BeforeValidator(_to_calendar_date)]


def format_date(value: date | None, default: str = "unknown") -> str:
    """Render a date as M/D/YYYY, the way the web app shows it."""
    if value is None:
        return default
    return f"{value.month}/{value.day}/{value.year}"
