"""
Domain models for the annotation workbench.

These are the core data structures used throughout the application.
"""

from .conversation_metadata import ConversationMetadata
from .evalset import (
    Content,
    EvalCase,
    EvalSet,
    EvalTurn,
    IntermediateData,
    InvocationEvent,
)
from .invocation import Invocation, ToolCallRecord
from .upstream import (
    FunctionCall,
    FunctionResponse,
    UpstreamContent,
    UpstreamEvent,
    UpstreamPart,
    UsageMetadata,
)
from .utils import gen_id, now_ms, short_id

__all__ = [
    # Utils
    "gen_id",
    "now_ms",
    "short_id",
    # Upstream models
    "FunctionCall",
    "FunctionResponse",
    "UpstreamPart",
    "UpstreamContent",
    "UsageMetadata",
    "UpstreamEvent",
    # Conversation models
    "ToolCallRecord",
    "Invocation",
    "ConversationMetadata",
    # Export models
    "Content",
    "InvocationEvent",
    "IntermediateData",
    "EvalTurn",
    "EvalCase",
    "EvalSet",
]
