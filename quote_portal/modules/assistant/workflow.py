"""
Bot Workflow Router

Classifies a customer message into a workflow by keyword and answers with a
canned response plus suggested replies. Holds no per-request state, so one
instance serves every request.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from quote_portal.modules.observability.logging_config import get_logger

from .intents import WORKFLOW_KEYWORDS, WorkflowType

logger = get_logger(__name__)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HistoryEntry(_CamelModel):
    role: str  # "user" | "bot"
    message: str
    timestamp: str


class BotContext(_CamelModel):
    session_id: str
    conversation_history: List[HistoryEntry] = Field(default_factory=list)
    current_workflow: Optional[WorkflowType] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class BotResponseData(_CamelModel):
    job_id: Optional[str] = None
    quote_id: Optional[str] = None
    next_action: Optional[str] = None
    suggestions: List[str] = Field(default_factory=list)
    requires_input: Optional[bool] = None
    metadata: Optional[Dict[str, Any]] = None


class BotMessageResponse(_CamelModel):
    success: bool
    message: str
    workflow_type: Optional[WorkflowType] = None
    data: Optional[BotResponseData] = None
    error: Optional[str] = None


def classify(message: str, context: Optional[BotContext] = None) -> WorkflowType:
    """
    Pick the workflow for a message.

    Keyword lists are tested in priority order (quote, job, review, FAQ). With
    no hit, an ongoing workflow from the context is kept, otherwise the message
    is a general question.

    Example:
        >>> classify("How much will my quote cost?")
        <WorkflowType.QUOTE_REQUEST: 'quote_request'>
    """
    message_lower = message.lower().strip()

    for workflow, keywords in WORKFLOW_KEYWORDS:
        if any(keyword in message_lower for keyword in keywords):
            return workflow

    if context is not None and context.current_workflow:
        return context.current_workflow

    return WorkflowType.GENERAL_QUESTION


class WorkflowHandler(ABC):
    """Base for the per-workflow responders."""

    type: WorkflowType = WorkflowType.UNKNOWN

    @abstractmethod
    async def handle(self, message: str, context: BotContext) -> BotMessageResponse:
        ...

    def _reply(self, message: str, **data) -> BotMessageResponse:
        return BotMessageResponse(
            success=True,
            message=message,
            workflow_type=self.type,
            data=BotResponseData(**data),
        )


class QuoteRequestHandler(WorkflowHandler):
    type = WorkflowType.QUOTE_REQUEST

    async def handle(self, message: str, context: BotContext) -> BotMessageResponse:
        return self._reply(
            "I'd be happy to help you with a quote! To provide an accurate estimate, "
            "I'll need some information about your move. Could you please tell me:\n\n"
            "1. Where are you moving from?\n"
            "2. Where are you moving to?\n"
            "3. When do you plan to move?\n"
            "4. Approximate size of your move (e.g., 1-bedroom apartment, 3-bedroom house)?",
            next_action="collect_move_details",
            requires_input=True,
            suggestions=[
                "I need a quote for moving",
                "What information do you need?",
                "Can you send me a quote form?",
            ],
        )


class JobInquiryHandler(WorkflowHandler):
    type = WorkflowType.JOB_INQUIRY

    async def handle(self, message: str, context: BotContext) -> BotMessageResponse:
        job_id = context.metadata.get("jobId")

        if job_id:
            return self._reply(
                f"I can help you with job {job_id}. What would you like to know?\n\n"
                "You can ask about:\n"
                "- Job status\n"
                "- Schedule details\n"
                "- Inventory information\n"
                "- Cost breakdown",
                job_id=str(job_id),
                next_action="provide_job_info",
                requires_input=True,
                suggestions=[
                    "What is the status of my job?",
                    "When is my scheduled move?",
                    "Show me the inventory",
                ],
            )

        return self._reply(
            "I can help you with job information. Please provide your job ID or booking number.",
            next_action="collect_job_id",
            requires_input=True,
            suggestions=["My job ID is...", "I need help with my booking"],
        )


class ReviewSubmissionHandler(WorkflowHandler):
    type = WorkflowType.REVIEW_SUBMISSION

    async def handle(self, message: str, context: BotContext) -> BotMessageResponse:
        return self._reply(
            "Thank you for wanting to share your feedback! I'll guide you through our review process.\n\n"
            "Please provide your job ID so I can pull up the details of your move.",
            next_action="collect_review_job_id",
            requires_input=True,
            suggestions=["My job ID is...", "Start review process"],
        )


class FAQHandler(WorkflowHandler):
    type = WorkflowType.FAQ

    async def handle(self, message: str, context: BotContext) -> BotMessageResponse:
        message_lower = message.lower()

        if "hours" in message_lower or "open" in message_lower:
            return self._reply(
                "Our business hours are:\n"
                "Monday - Friday: 8:00 AM - 6:00 PM\n"
                "Saturday: 9:00 AM - 4:00 PM\n"
                "Sunday: Closed\n\n"
                "For after-hours emergencies, please call our emergency line.",
                suggestions=["Contact information", "Other questions", "Get a quote"],
            )

        if any(word in message_lower for word in ("contact", "phone", "email")):
            return self._reply(
                "You can reach us at:\n"
                "Phone: 1-800-MOVEWARE\n"
                "Email: info@moveware.com\n"
                "Website: www.moveware.com\n\n"
                "We typically respond within 24 hours during business days.",
                suggestions=["Business hours", "Get a quote", "Other questions"],
            )

        return self._reply(
            "I'm here to answer your questions! Here are some common topics:\n\n"
            "• Business hours and contact information\n"
            "• Services we offer\n"
            "• Pricing and quotes\n"
            "• Moving tips and preparation\n\n"
            "What would you like to know?",
            suggestions=[
                "What are your hours?",
                "How do I contact you?",
                "What services do you offer?",
            ],
        )


class GeneralQuestionHandler(WorkflowHandler):
    type = WorkflowType.GENERAL_QUESTION

    async def handle(self, message: str, context: BotContext) -> BotMessageResponse:
        return self._reply(
            "Hello! I'm here to help you with:\n\n"
            "**Quote Requests** - Get pricing estimates for your move\n"
            "**Job Inquiries** - Check status, schedule, and details\n"
            "**Reviews** - Share your moving experience\n"
            "**Questions** - Ask me anything about our services\n\n"
            "What would you like help with today?",
            next_action="await_user_intent",
            requires_input=True,
            suggestions=[
                "I need a quote",
                "Check my job status",
                "Submit a review",
                "General questions",
            ],
        )


APOLOGY_MESSAGE = (
    "I apologize, but I encountered an error processing your message. "
    "Please try again or contact support if the issue persists."
)


class BotWorkflowService:
    def __init__(self, handlers: Optional[List[WorkflowHandler]] = None):
        self.handlers = handlers or [
            QuoteRequestHandler(),
            JobInquiryHandler(),
            ReviewSubmissionHandler(),
            FAQHandler(),
            GeneralQuestionHandler(),
        ]

    def _find_handler(self, workflow: WorkflowType) -> Optional[WorkflowHandler]:
        return next((h for h in self.handlers if h.type == workflow), None)

    async def process_message(self, message: str, context: BotContext) -> BotMessageResponse:
        """
        Route a message to its workflow handler.

        Handler failures never propagate; the caller gets an apology response
        with success=False instead.
        """
        try:
            workflow = classify(message, context)
            handler = self._find_handler(workflow) or self._find_handler(WorkflowType.GENERAL_QUESTION)

            if handler is None:
                return BotMessageResponse(
                    success=False,
                    message="I'm sorry, I didn't understand that. Could you please rephrase?",
                    error="No suitable handler found",
                )

            logger.info(f"[Bot] session={context.session_id} workflow={workflow.value} handler={type(handler).__name__}")
            return await handler.handle(message, context)

        except Exception as e:
            logger.exception(f"[Bot] Error processing message for session {context.session_id}")
            return BotMessageResponse(success=False, message=APOLOGY_MESSAGE, error=str(e) or type(e).__name__)


_workflow_service: Optional[BotWorkflowService] = None


def get_workflow_service() -> BotWorkflowService:
    """Process-wide router, built on first use."""
    global _workflow_service
    if _workflow_service is None:
        _workflow_service = BotWorkflowService()
    return _workflow_service
