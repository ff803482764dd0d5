"""
Bot API endpoints.
Routes customer chat messages through the workflow router and keeps the
conversation history per session.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from quote_portal.core.dependencies import get_bot_service, get_conversations
from quote_portal.core.exceptions import NotFound
from quote_portal.core.schemas import BotMessageRequest, envelope
from quote_portal.modules.assistant.session_store import ConversationStore
from quote_portal.modules.assistant.workflow import BotWorkflowService
from quote_portal.modules.observability.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/bot", tags=["Bot"])


def _invalid(message: str, error: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "message": message, "error": error})


@router.post("/message")
async def handle_message(
    request: BotMessageRequest,
    service: BotWorkflowService = Depends(get_bot_service),
    store: ConversationStore = Depends(get_conversations),
):
    """
    Process one customer message.

    Repeating a request with the same idempotencyKey in the same session
    returns the first reply without running the workflow again.
    """
    if not isinstance(request.message, str) or not request.message.strip():
        return _invalid("Message is required and must be a non-empty string", "Invalid message")
    if not isinstance(request.session_id, str) or not request.session_id.strip():
        return _invalid("Session ID is required and must be a non-empty string", "Invalid session ID")

    message = request.message.strip()
    session_id = request.session_id.strip()
    key = request.idempotency_key

    existing = store.get(session_id)
    if key and existing and key in existing.replies:
        logger.info(f"[Bot] Idempotent replay for session {session_id}: {key}")
        return existing.replies[key]

    conversation = existing or store.get_or_create(session_id)
    if request.context:
        conversation.metadata.update(request.context.as_metadata())

    context = conversation.to_context()
    conversation.add_message("user", message)

    response = await service.process_message(message, context)

    conversation.add_message("bot", response.message)
    if response.workflow_type and response.workflow_type != conversation.current_workflow:
        conversation.current_workflow = response.workflow_type

    body = response.model_dump(by_alias=True, exclude_none=True, mode="json")
    if key:
        conversation.remember_reply(key, body)
    return body


@router.get("/message")
async def describe_message_endpoint():
    return {
        "endpoint": "/api/bot/message",
        "methods": ["POST"],
        "description": "Send messages to the bot with conversation context",
        "requiredFields": ["message", "sessionId"],
        "optionalFields": ["idempotencyKey", "context"],
    }


@router.get("/conversations/{session_id}")
async def get_conversation(session_id: str, store: ConversationStore = Depends(get_conversations)):
    conversation = store.get(session_id)
    if not conversation:
        raise NotFound("Conversation not found")
    return envelope(conversation.to_dict(), source="local")


@router.delete("/conversations/{session_id}")
async def delete_conversation(session_id: str, store: ConversationStore = Depends(get_conversations)):
    if not store.delete(session_id):
        raise NotFound("Conversation not found")
    logger.info(f"[Bot] Deleted conversation {session_id}")
    return envelope(message="Conversation deleted")
