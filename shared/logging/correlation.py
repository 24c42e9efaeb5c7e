import time
import uuid

import structlog


def new_correlation_id(prefix: str = "msg") -> str:
    """Build a correlation ID for one submitted message."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}_{int(time.time())}"


def set_correlation_id(correlation_id: str) -> None:
    """Set correlation ID for current context."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def get_correlation_id() -> str | None:
    """Get correlation ID from current context."""
    return structlog.contextvars.get_contextvars().get("correlation_id")


def bind_context(**values: object) -> list[str]:
    """Bind values that are not already bound.

    Returns the keys that were newly bound, so the caller can unbind
    exactly those when it is done.
    """
    preexisting = structlog.contextvars.get_contextvars()
    bound = [key for key in values if key not in preexisting]
    structlog.contextvars.bind_contextvars(**values)
    return bound


def unbind_context(keys: list[str]) -> None:
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()
