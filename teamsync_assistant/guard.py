"""Input guard for submitted messages.

Runs before any parsing or data access. Checks are ordered: the
transient ones (empty input, rate limit) come first so that they never
touch the transcript or move the rate gate.
"""

from dataclasses import dataclass

import structlog

from .config import Settings
from .session import SessionState

logger = structlog.get_logger()

EMPTY_MESSAGE = "Please type something."
RATE_LIMITED = "Please wait before sending another message"
NOT_SIGNED_IN = "Please sign in to use the assistant."
NOT_CONFIGURED = (
    "The data store is not configured. Set TEAMSYNC_SUPABASE_URL and TEAMSYNC_SUPABASE_KEY."
)


def too_long_message(limit: int) -> str:
    return f"Message too long. Please keep messages under {limit} characters."


@dataclass(frozen=True)
class Rejection:
    message: str
    # Transient rejections are shown once and never recorded
    transient: bool = False


class InputGuard:
    def __init__(self, settings: Settings) -> None:
        self.max_length = settings.max_message_length
        self.min_interval = settings.rate_limit_ms / 1000

    def precheck(self, text: str, session: SessionState, now: float) -> Rejection | None:
        """Transient checks. A message that passes is accepted by the rate gate."""
        if not text.strip():
            return Rejection(EMPTY_MESSAGE, transient=True)
        if session.last_request_at and now - session.last_request_at < self.min_interval:
            logger.info(
                "rate_limited",
                elapsed_ms=int((now - session.last_request_at) * 1000),
                min_interval_ms=int(self.min_interval * 1000),
            )
            return Rejection(RATE_LIMITED, transient=True)
        return None

    def validate(self, text: str, session: SessionState) -> Rejection | None:
        """Checks whose rejection is answered in the transcript."""
        if len(text.strip()) > self.max_length:
            return Rejection(too_long_message(self.max_length))
        if not session.user_id:
            return Rejection(NOT_SIGNED_IN)
        if not session.store_configured:
            return Rejection(NOT_CONFIGURED)
        return None
