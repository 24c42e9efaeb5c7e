"""TeamSync chat assistant: a command interpreter over projects and tasks."""

from .interpreter import Assistant, Reply, ReplyKind
from .session import ChatMessage, Role, SessionState

__all__ = ["Assistant", "Reply", "ReplyKind", "ChatMessage", "Role", "SessionState"]
