"""
Workflow types for the portal chat bot.
"""

from enum import Enum


class WorkflowType(str, Enum):
    QUOTE_REQUEST = "quote_request"
    JOB_INQUIRY = "job_inquiry"
    REVIEW_SUBMISSION = "review_submission"
    GENERAL_QUESTION = "general_question"
    FAQ = "faq"
    UNKNOWN = "unknown"


# Checked in this order; the first list with a substring hit wins.
WORKFLOW_KEYWORDS = [
    (WorkflowType.QUOTE_REQUEST, ["quote", "pricing", "cost", "price", "estimate", "how much"]),
    (WorkflowType.JOB_INQUIRY, ["job", "order", "booking", "schedule", "appointment", "status"]),
    (WorkflowType.REVIEW_SUBMISSION, ["review", "feedback", "rating", "survey", "experience"]),
    (WorkflowType.FAQ, ["help", "how", "what", "when", "where", "why", "can i", "do you"]),
]
