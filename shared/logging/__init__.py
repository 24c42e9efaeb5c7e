from .config import setup_logging
from .correlation import (
    bind_context,
    clear_context,
    get_correlation_id,
    new_correlation_id,
    set_correlation_id,
    unbind_context,
)

__all__ = [
    "setup_logging",
    "new_correlation_id",
    "set_correlation_id",
    "get_correlation_id",
    "bind_context",
    "unbind_context",
    "clear_context",
]
