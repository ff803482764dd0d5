"""
Conversation Store

Keeps per-session bot state in memory: recent message history, the workflow
the customer is currently in, and replies cached by idempotency key.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from quote_portal.core.config import get_settings
from quote_portal.modules.observability.logging_config import get_logger

from .intents import WorkflowType
from .workflow import BotContext, HistoryEntry

logger = get_logger(__name__)


@dataclass
class Conversation:
    """
    Bot state for one session.

    Only the newest `history_limit` messages and cached replies are kept.
    """
    session_id: str
    created_at: datetime = field(default_factory=datetime.now)
    last_activity: datetime = field(default_factory=datetime.now)

    messages: List[Dict[str, str]] = field(default_factory=list)
    current_workflow: Optional[WorkflowType] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    # idempotency key -> serialized reply
    replies: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    history_limit: int = 50

    def add_message(self, role: str, content: str):
        self.messages.append({
            "role": role,
            "message": content,
            "timestamp": datetime.now().isoformat()
        })
        if len(self.messages) > self.history_limit:
            self.messages = self.messages[-self.history_limit:]
        self.last_activity = datetime.now()

    def remember_reply(self, key: str, reply: Dict[str, Any]):
        self.replies[key] = reply
        while len(self.replies) > self.history_limit:
            # oldest first
            del self.replies[next(iter(self.replies))]

    def to_context(self, metadata: Optional[Dict[str, Any]] = None) -> BotContext:
        """Snapshot handed to the workflow router."""
        merged = {**self.metadata, **(metadata or {})}
        return BotContext(
            session_id=self.session_id,
            conversation_history=[HistoryEntry(**m) for m in self.messages],
            current_workflow=self.current_workflow,
            metadata=merged,
        )

    def is_expired(self, timeout_minutes: int = 30) -> bool:
        threshold = datetime.now() - timedelta(minutes=timeout_minutes)
        return self.last_activity < threshold

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "currentWorkflow": self.current_workflow.value if self.current_workflow else None,
            "metadata": self.metadata,
            "messages": list(self.messages),
            "createdAt": self.created_at.isoformat(),
            "lastActivity": self.last_activity.isoformat(),
        }


class ConversationStore:
    """
    In-memory conversation store with inactivity expiry.

    State lives in this process only and is lost on restart.
    """

    def __init__(self, session_timeout_minutes: int = 30, history_limit: int = 50):
        self.conversations: Dict[str, Conversation] = {}
        self.session_timeout_minutes = session_timeout_minutes
        self.history_limit = history_limit

    def get_or_create(self, session_id: str) -> Conversation:
        self._cleanup_expired()

        conversation = self.conversations.get(session_id)
        if conversation is None:
            conversation = Conversation(session_id=session_id, history_limit=self.history_limit)
            self.conversations[session_id] = conversation
            logger.info(f"[Bot] Created conversation: {session_id}")
            return conversation

        conversation.last_activity = datetime.now()
        return conversation

    def get(self, session_id: str) -> Optional[Conversation]:
        """Conversation by id, or None when unknown or expired."""
        conversation = self.conversations.get(session_id)
        if not conversation:
            return None

        if conversation.is_expired(self.session_timeout_minutes):
            del self.conversations[session_id]
            return None

        return conversation

    def delete(self, session_id: str) -> bool:
        return self.conversations.pop(session_id, None) is not None

    def clear(self):
        self.conversations.clear()

    def count(self) -> int:
        return len(self.conversations)

    def _cleanup_expired(self):
        expired_ids = [
            session_id
            for session_id, conversation in self.conversations.items()
            if conversation.is_expired(self.session_timeout_minutes)
        ]
        for session_id in expired_ids:
            del self.conversations[session_id]
        if expired_ids:
            logger.info(f"[Bot] Expired {len(expired_ids)} conversations")


_conversation_store: Optional[ConversationStore] = None


def get_conversation_store() -> ConversationStore:
    global _conversation_store
    if _conversation_store is None:
        settings = get_settings()
        _conversation_store = ConversationStore(
            session_timeout_minutes=settings.SESSION_TIMEOUT_MINUTES,
            history_limit=settings.BOT_HISTORY_LIMIT,
        )
    return _conversation_store
