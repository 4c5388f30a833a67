"""
Core business logic package.

This package contains transport-agnostic logic for the annotation workbench:
event translation, frame decoding, invocation recording, session reuse and
evalset export. The server package provides HTTP bindings around it.
"""

from .events import (
    DomainEvent,
    DoneEvent,
    ErrorEvent,
    TextMessageEvent,
    ThinkingEvent,
    ToolCallEvent,
    ToolResultEvent,
    is_terminal,
    parse_domain_event,
)
from .exceptions import (
    CoreError,
    InvalidOperationError,
    NotFoundError,
    StorageError,
    UpstreamError,
    ValidationError,
)
from .export import build_evalset
from .models import (
    ConversationMetadata,
    EvalSet,
    Invocation,
    ToolCallRecord,
    UpstreamEvent,
    gen_id,
    now_ms,
)
from .recorder import (
    InvocationRecorder,
    RecorderState,
    apply_feedback,
    edit_agent_message,
)
from .sessions import InMemorySessionStore, SessionRegistry, SessionStore
from .transport import FrameDecoder, UpstreamLineDecoder, encode_frame, iter_frames
from .translator import translate_event, translate_stream

__all__ = [
    # Exceptions
    "CoreError",
    "NotFoundError",
    "ValidationError",
    "StorageError",
    "UpstreamError",
    "InvalidOperationError",
    # Events
    "DomainEvent",
    "TextMessageEvent",
    "ToolCallEvent",
    "ToolResultEvent",
    "ThinkingEvent",
    "DoneEvent",
    "ErrorEvent",
    "is_terminal",
    "parse_domain_event",
    # Models
    "UpstreamEvent",
    "Invocation",
    "ToolCallRecord",
    "ConversationMetadata",
    "EvalSet",
    "gen_id",
    "now_ms",
    # Translation and transport
    "translate_event",
    "translate_stream",
    "encode_frame",
    "FrameDecoder",
    "UpstreamLineDecoder",
    "iter_frames",
    # Recording
    "InvocationRecorder",
    "RecorderState",
    "edit_agent_message",
    "apply_feedback",
    # Sessions
    "SessionStore",
    "InMemorySessionStore",
    "SessionRegistry",
    # Export
    "build_evalset",
]
