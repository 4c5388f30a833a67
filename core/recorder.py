"""
Invocation recording.

Folds the DomainEvent sequence of one user turn into a sealed Invocation, and
implements the post-seal annotation operations (edit, rating, feedback) on a
conversation's invocation list.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel

from .events import (
    TIMELINE_EVENT_TYPES,
    DoneEvent,
    ErrorEvent,
    TextMessageEvent,
    ThinkingEvent,
    ToolCallEvent,
    ToolResultEvent,
)
from .exceptions import InvalidOperationError, NotFoundError, ValidationError
from .models import Invocation, ToolCallRecord, gen_id, now_ms

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
TEXT_SEPARATOR = "\n\n"


class RecorderState(str, Enum):
    IDLE = "idle"
    OPEN = "open"
    ACCUMULATING = "accumulating"
    SEALED = "sealed"
    ABORTED = "aborted"


@dataclass
class TurnDraft:
    """In-progress state of one user turn."""

    user_message: str
    agent_message: str = ""
    author: str | None = None
    events: list[dict[str, Any]] = field(default_factory=list)
    tool_calls: list[ToolCallRecord] = field(default_factory=list)
    # tool call id -> index into tool_calls
    _call_index: dict[str, int] = field(default_factory=dict)


TextListener = Callable[[TurnDraft, TextMessageEvent], None]
TimelineListener = Callable[[TurnDraft, BaseModel], None]


class InvocationRecorder:
    """
    Accumulates one conversation's turns into Invocations.

    A turn moves OPEN -> ACCUMULATING -> SEALED on a done event, or to ABORTED
    on an error event. Text updates and timeline updates are reported to
    separate listeners because they render as separate artifacts.
    """

    def __init__(
        self,
        conversation_id: str | None = None,
        invocations: list[Invocation] | None = None,
        on_text: TextListener | None = None,
        on_timeline: TimelineListener | None = None,
    ) -> None:
        self.conversation_id = conversation_id
        self.state = RecorderState.IDLE
        self.draft: TurnDraft | None = None
        self.last_error: str | None = None
        self.last_user_message: str | None = None
        self._invocations: list[Invocation] = list(invocations or [])
        self._on_text = on_text
        self._on_timeline = on_timeline

    @property
    def invocations(self) -> list[Invocation]:
        """Sealed invocations in submission order."""
        return list(self._invocations)

    @property
    def in_progress(self) -> bool:
        return self.state in (RecorderState.OPEN, RecorderState.ACCUMULATING)

    def begin(self, user_message: str) -> TurnDraft:
        """Open a new turn for a submitted user message."""
        if self.in_progress:
            raise InvalidOperationError("A turn is already in progress")
        self.draft = TurnDraft(user_message=user_message)
        self.state = RecorderState.OPEN
        self.last_error = None
        self.last_user_message = user_message
        return self.draft

    def apply(self, event: BaseModel) -> Invocation | None:
        """
        Fold one DomainEvent into the open turn.

        Returns:
            The sealed Invocation when event is a done event, else None

        Raises:
            InvalidOperationError: If no turn is open
        """
        if not self.in_progress or self.draft is None:
            raise InvalidOperationError(
                f"Cannot apply {getattr(event, 'type', 'event')} while {self.state.value}"
            )

        if isinstance(event, DoneEvent):
            return self._seal()
        if isinstance(event, ErrorEvent):
            self._abort(event.error)
            return None

        self.state = RecorderState.ACCUMULATING
        if isinstance(event, TextMessageEvent):
            self._append_text(event)
        elif getattr(event, "type", None) in TIMELINE_EVENT_TYPES:
            self._append_timeline(event)
        return None

    def _append_text(self, event: TextMessageEvent) -> None:
        draft = self.draft
        if draft.agent_message:
            draft.agent_message += TEXT_SEPARATOR
        draft.agent_message += event.data.content
        if event.data.author:
            draft.author = event.data.author
        if self._on_text:
            self._on_text(draft, event)

    def _append_timeline(self, event: BaseModel) -> None:
        draft = self.draft
        draft.events.append(event.model_dump(exclude_none=True, mode="json"))

        if isinstance(event, ToolCallEvent):
            draft._call_index[event.data.id] = len(draft.tool_calls)
            draft.tool_calls.append(
                ToolCallRecord(name=event.data.name, args=event.data.args)
            )
        elif isinstance(event, ToolResultEvent):
            record = self._match_tool_call(event)
            if record is not None:
                record.result = event.data.result
        elif isinstance(event, ThinkingEvent) and event.data.author and not draft.author:
            draft.author = event.data.author

        if self._on_timeline:
            self._on_timeline(draft, event)

    def _match_tool_call(self, event: ToolResultEvent) -> ToolCallRecord | None:
        draft = self.draft
        index = draft._call_index.get(event.data.id)
        if index is not None:
            return draft.tool_calls[index]
        for record in draft.tool_calls:
            if record.name == event.data.name and record.result is None:
                return record
        return None

    def _seal(self) -> Invocation:
        draft = self.draft
        invocation = Invocation(
            invocation_id=gen_id("inv_"),
            user_message=draft.user_message,
            agent_message=draft.agent_message,
            timestamp=now_ms(),
            tool_calls=draft.tool_calls,
            events=draft.events,
            author=draft.author,
            custom_original_agent_message=draft.agent_message,
        )
        self._invocations.append(invocation)
        self.draft = None
        self.state = RecorderState.SEALED
        logger.debug(
            "Sealed invocation %s (%d timeline events)",
            invocation.invocation_id,
            len(invocation.events),
        )
        return invocation

    def fail(self, message: str) -> None:
        """Abort the open turn for a failure outside the event stream."""
        if self.in_progress:
            self._abort(message)
        else:
            self.last_error = message

    def reset(self, conversation_id: str | None = None) -> None:
        """Start over with an empty conversation."""
        self.conversation_id = conversation_id
        self.state = RecorderState.IDLE
        self.draft = None
        self.last_error = None
        self._invocations = []

    def _abort(self, message: str) -> None:
        logger.warning("Turn aborted: %s", message)
        self.draft = None
        self.last_error = message
        self.state = RecorderState.ABORTED

    def edit(self, invocation_id: str, new_text: str) -> Invocation:
        """Edit the agent message of a sealed invocation."""
        return edit_agent_message(self._invocations, invocation_id, new_text)

    def annotate(
        self,
        invocation_id: str,
        rating: int | None = None,
        feedback: str | None = None,
    ) -> Invocation:
        """Set rating and/or feedback on a sealed invocation."""
        return apply_feedback(self._invocations, invocation_id, rating, feedback)


def find_invocation(invocations: list[Invocation], invocation_id: str) -> Invocation:
    """
    Locate an invocation by ID.

    Raises:
        NotFoundError: If no invocation has that ID
    """
    for invocation in invocations:
        if invocation.invocation_id == invocation_id:
            return invocation
    raise NotFoundError("Invocation", invocation_id)


def edit_agent_message(
    invocations: list[Invocation], invocation_id: str, new_text: str
) -> Invocation:
    """
    Replace an invocation's agent message.

    The unedited text is captured into custom_original_agent_message on the
    first edit only; later edits leave that snapshot untouched.

    Raises:
        NotFoundError: If no invocation has that ID
    """
    invocation = find_invocation(invocations, invocation_id)
    if invocation.custom_original_agent_message is None:
        invocation.custom_original_agent_message = invocation.agent_message
    invocation.agent_message = new_text
    return invocation


def validate_rating(rating: int) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("rating must be an integer")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"rating must be between {MIN_RATING} and {MAX_RATING}")
    return rating


def apply_feedback(
    invocations: list[Invocation],
    invocation_id: str,
    rating: int | None = None,
    feedback: str | None = None,
) -> Invocation:
    """
    Upsert rating and feedback on an invocation.

    Fields passed as None are left as they are.

    Raises:
        ValidationError: If rating is outside 1..5
        NotFoundError: If no invocation has that ID
    """
    if rating is not None:
        validate_rating(rating)
    invocation = find_invocation(invocations, invocation_id)
    if rating is not None:
        invocation.custom_rating = rating
    if feedback is not None:
        invocation.custom_feedback = feedback
    return invocation
