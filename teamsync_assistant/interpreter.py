"""Message pipeline: guard, match, execute, record.

One command runs at a time per session. While a command is in flight
the session is busy and further submissions are ignored. Every command
runs under the configured timeout, so a stalled store can not leave the
session busy.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
import time

from pydantic import ValidationError
import structlog

from shared.logging import bind_context, new_correlation_id, unbind_context

from .clients.store import DataStore, StoreError
from .config import Settings
from .guard import InputGuard
from .handlers import ActionExecutor
from .intents import parse_intent
from .session import Role, SessionState

logger = structlog.get_logger()

TIMED_OUT = "The request timed out. Please try again."


class ReplyKind(str, Enum):
    # Recorded in the transcript as an assistant message
    ANSWER = "answer"
    # Shown once, not recorded
    NOTICE = "notice"
    ERROR = "error"


@dataclass(frozen=True)
class Reply:
    text: str
    kind: ReplyKind = ReplyKind.ANSWER

    @property
    def recorded(self) -> bool:
        return self.kind == ReplyKind.ANSWER


class Assistant:
    def __init__(
        self,
        store: DataStore | None,
        settings: Settings,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store
        self.settings = settings
        self.guard = InputGuard(settings)
        self.clock = clock

    def new_session(self) -> SessionState:
        return SessionState(
            user_id=self.settings.current_user_id(),
            store_configured=self.store is not None and self.settings.store_configured,
        )

    def _answer(self, session: SessionState, text: str) -> Reply:
        session.append(Role.ASSISTANT, text)
        return Reply(text)

    async def submit(self, session: SessionState, text: str) -> Reply | None:
        """Process one message. Returns None if the session is busy."""
        if session.busy:
            logger.debug("submission_ignored_busy", session_id=session.session_id)
            return None

        now = self.clock()
        rejection = self.guard.precheck(text, session, now)
        if rejection:
            return Reply(rejection.message, ReplyKind.NOTICE)

        session.last_request_at = now
        session.append(Role.USER, text)
        session.busy = True
        bound = bind_context(correlation_id=new_correlation_id(), session_id=session.session_id)
        try:
            logger.info("command_received", text_length=len(text))

            rejection = self.guard.validate(text, session)
            if rejection:
                logger.info("command_rejected", reason=rejection.message)
                return self._answer(session, rejection.message)

            intent = parse_intent(text)
            logger.info("intent_matched", intent=type(intent).__name__)

            executor = ActionExecutor(self.store, session.user_id, self.settings.list_limit)
            try:
                reply = await asyncio.wait_for(
                    executor.execute(intent), timeout=self.settings.request_timeout
                )
            except TimeoutError:
                logger.error(
                    "command_timed_out",
                    intent=type(intent).__name__,
                    timeout=self.settings.request_timeout,
                )
                return Reply(TIMED_OUT, ReplyKind.ERROR)
            except (StoreError, ValidationError) as e:
                logger.error(
                    "command_failed",
                    intent=type(intent).__name__,
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True,
                )
                return Reply(f"Something went wrong: {e}", ReplyKind.ERROR)

            return self._answer(session, reply)
        finally:
            session.busy = False
            unbind_context(bound)
