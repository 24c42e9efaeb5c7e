"""Per-session state for the assistant.

A session owns its transcript, its busy flag and its rate-limit gate.
Nothing here is shared between sessions and nothing is persisted: a new
session starts empty and is simply dropped when it ends.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
import uuid


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str
    ts: datetime = field(default_factory=lambda: datetime.now(UTC))
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])


@dataclass
class SessionState:
    user_id: str | None = None
    store_configured: bool = False
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    transcript: list[ChatMessage] = field(default_factory=list)
    busy: bool = False
    # Monotonic seconds of the last request that passed the rate gate
    last_request_at: float = 0.0

    def append(self, role: Role, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content)
        self.transcript.append(message)
        return message

    def assistant_messages(self) -> list[ChatMessage]:
        return [m for m in self.transcript if m.role == Role.ASSISTANT]
