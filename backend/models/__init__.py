"""Data models for the Louisiana Business Assistant."""
from .action_item import ActionItem
from .assessment import AssessmentAnswers, STAGE_DESCRIPTIONS
from .conversation import Message, ConversationRequest, CompletionResult, USER, ASSISTANT, ROLES
from .errors import ErrorKind
from .api import ChatResponse, ErrorResponse, HealthResponse

__all__ = [
    "ActionItem",
    "AssessmentAnswers",
    "STAGE_DESCRIPTIONS",
    "Message",
    "ConversationRequest",
    "CompletionResult",
    "USER",
    "ASSISTANT",
    "ROLES",
    "ErrorKind",
    "ChatResponse",
    "ErrorResponse",
    "HealthResponse",
]
