"""
HTTP request models for the API.

These are Pydantic models for validating and parsing API requests.
"""

from .agent_config_request import AgentConfigRequest
from .chat_request import ChatRequest
from .edit_request import EditRequest
from .export_request import ExportRequest
from .feedback_request import FeedbackRequest
from .save_conversation_request import SaveConversationRequest

__all__ = [
    # Chat requests
    "ChatRequest",
    # Conversation requests
    "SaveConversationRequest",
    "EditRequest",
    "FeedbackRequest",
    "ExportRequest",
    # Settings requests
    "AgentConfigRequest",
]
