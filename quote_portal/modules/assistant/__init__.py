from .intents import WorkflowType
from .session_store import Conversation, ConversationStore, get_conversation_store
from .workflow import BotContext, BotMessageResponse, BotWorkflowService, classify, get_workflow_service

__all__ = [
    "WorkflowType",
    "Conversation",
    "ConversationStore",
    "get_conversation_store",
    "BotContext",
    "BotMessageResponse",
    "BotWorkflowService",
    "classify",
    "get_workflow_service",
]
