"""
FastAPI dependencies.

Tests swap these out through app.dependency_overrides.
"""

from typing import Iterator

from sqlalchemy.orm import Session

from quote_portal.modules.assistant.session_store import ConversationStore, get_conversation_store
from quote_portal.modules.assistant.workflow import BotWorkflowService, get_workflow_service
from quote_portal.modules.companies.database import get_db_manager
from quote_portal.modules.moveware.client import ClientFactory, create_moveware_client


def get_db() -> Iterator[Session]:
    """One SQLAlchemy session per request, closed afterwards."""
    session = get_db_manager().get_session()
    try:
        yield session
    finally:
        session.close()


def get_moveware_client_factory() -> ClientFactory:
    return create_moveware_client


def get_bot_service() -> BotWorkflowService:
    return get_workflow_service()


def get_conversations() -> ConversationStore:
    return get_conversation_store()
