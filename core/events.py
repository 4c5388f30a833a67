"""
Domain event types.

Each DomainEvent is one typed, ordered unit produced from the upstream agent
stream. The wire form is ``{"type": ..., "data": {...}}`` for payload events
and ``{"type": "error", "error": "..."}`` for failures.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from .models.utils import now_ms

TIMELINE_EVENT_TYPES = frozenset({"tool_call", "tool_result", "thinking"})


class TextMessageData(BaseModel):
    id: str
    content: str
    author: str | None = None
    hasThinking: bool = False
    thoughtsTokenCount: int | None = None
    totalTokenCount: int | None = None
    thoughtSignature: str | None = None
    timestamp: int = Field(default_factory=now_ms)
    rawEvent: dict[str, Any] | None = None


class ToolCallData(BaseModel):
    id: str
    name: str
    args: dict[str, Any] = Field(default_factory=dict)
    author: str | None = None
    rawEvent: dict[str, Any] | None = None


class ToolResultData(BaseModel):
    id: str
    name: str
    result: Any = None
    author: str | None = None
    rawEvent: dict[str, Any] | None = None


class ThinkingData(BaseModel):
    thoughtsTokenCount: int | None = None
    totalTokenCount: int | None = None
    thoughtSignature: str | None = None
    author: str | None = None
    rawEvent: dict[str, Any] | None = None


class DoneData(BaseModel):
    messageId: str | None = None


class TextMessageEvent(BaseModel):
    type: Literal["text_message"] = "text_message"
    data: TextMessageData


class ToolCallEvent(BaseModel):
    type: Literal["tool_call"] = "tool_call"
    data: ToolCallData


class ToolResultEvent(BaseModel):
    type: Literal["tool_result"] = "tool_result"
    data: ToolResultData


class ThinkingEvent(BaseModel):
    type: Literal["thinking"] = "thinking"
    data: ThinkingData


class DoneEvent(BaseModel):
    type: Literal["done"] = "done"
    data: DoneData = Field(default_factory=DoneData)


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    error: str


DomainEvent = Annotated[
    Union[
        TextMessageEvent,
        ToolCallEvent,
        ToolResultEvent,
        ThinkingEvent,
        DoneEvent,
        ErrorEvent,
    ],
    Field(discriminator="type"),
]

_domain_event_adapter: TypeAdapter[DomainEvent] = TypeAdapter(DomainEvent)


def parse_domain_event(payload: dict[str, Any]) -> DomainEvent:
    """Validate a decoded frame into its DomainEvent class.

    Raises:
        pydantic.ValidationError: If the payload is not a known event shape
    """
    return _domain_event_adapter.validate_python(payload)


def is_terminal(event: BaseModel) -> bool:
    """True for the events that end a turn."""
    return isinstance(event, (DoneEvent, ErrorEvent))
