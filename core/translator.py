"""
Upstream event translation.

Converts the raw Agent Engine event stream for one query into the ordered
DomainEvent sequence the UI consumes. Translation is stateless: every call to
translate_stream handles exactly one query.
"""

import logging
from typing import Any, AsyncIterable, AsyncGenerator

from pydantic import ValidationError as PydanticValidationError

from .events import (
    DomainEvent,
    DoneData,
    DoneEvent,
    ErrorEvent,
    TextMessageData,
    TextMessageEvent,
    ThinkingData,
    ThinkingEvent,
    ToolCallData,
    ToolCallEvent,
    ToolResultData,
    ToolResultEvent,
)
from .models import UpstreamEvent, UpstreamPart, gen_id

logger = logging.getLogger(__name__)


def translate_event(
    raw_event: dict[str, Any],
    emit_thinking_with_text: bool = False,
) -> list[DomainEvent]:
    """
    Translate one upstream event into its DomainEvents.

    Parts are handled in source order. Within a part the order is fixed:
    tool call, tool result, thinking, text. A thought signature that arrives
    together with text is folded into the text event unless
    emit_thinking_with_text is set.

    Args:
        raw_event: Decoded upstream event
        emit_thinking_with_text: Also emit a thinking event for parts that carry text

    Returns:
        DomainEvents for this upstream event, possibly empty

    Raises:
        pydantic.ValidationError: If raw_event is not a valid upstream event
    """
    event = UpstreamEvent.model_validate(raw_event)
    if event.content is None:
        return []

    author = event.author
    usage = event.usage_metadata
    thoughts_tokens = usage.thoughts_token_count if usage else None
    total_tokens = usage.total_token_count if usage else None

    translated: list[DomainEvent] = []
    for part in event.content.parts:
        translated.extend(
            _translate_part(
                part,
                raw_event,
                author,
                thoughts_tokens,
                total_tokens,
                emit_thinking_with_text,
            )
        )
    return translated


def _translate_part(
    part: UpstreamPart,
    raw_event: dict[str, Any],
    author: str | None,
    thoughts_tokens: int | None,
    total_tokens: int | None,
    emit_thinking_with_text: bool,
) -> list[DomainEvent]:
    events: list[DomainEvent] = []

    if part.function_call:
        events.append(
            ToolCallEvent(
                data=ToolCallData(
                    id=part.function_call.id or gen_id("call_"),
                    name=part.function_call.name,
                    args=part.function_call.args,
                    author=author,
                    rawEvent=raw_event,
                )
            )
        )

    if part.function_response:
        events.append(
            ToolResultEvent(
                data=ToolResultData(
                    id=part.function_response.id or gen_id("call_"),
                    name=part.function_response.name,
                    result=part.function_response.response,
                    author=author,
                    rawEvent=raw_event,
                )
            )
        )

    if part.thought_signature and (not part.text or emit_thinking_with_text):
        events.append(
            ThinkingEvent(
                data=ThinkingData(
                    thoughtsTokenCount=thoughts_tokens,
                    totalTokenCount=total_tokens,
                    thoughtSignature=part.thought_signature,
                    author=author,
                    rawEvent=raw_event,
                )
            )
        )

    if part.text:
        events.append(
            TextMessageEvent(
                data=TextMessageData(
                    id=gen_id("msg_"),
                    content=part.text,
                    author=author,
                    hasThinking=bool(part.thought_signature),
                    thoughtsTokenCount=thoughts_tokens,
                    totalTokenCount=total_tokens,
                    thoughtSignature=part.thought_signature,
                    rawEvent=raw_event,
                )
            )
        )

    return events


async def translate_stream(
    upstream: AsyncIterable[dict[str, Any]],
    emit_thinking_with_text: bool = False,
    message_id: str | None = None,
) -> AsyncGenerator[DomainEvent, None]:
    """
    Translate an upstream event stream into DomainEvents.

    Always ends with exactly one terminal event: DoneEvent when the upstream
    iterator is exhausted, ErrorEvent when it raises. Upstream items that are
    not valid events are skipped with a warning.

    Args:
        upstream: Async iterable of decoded upstream events
        emit_thinking_with_text: See translate_event
        message_id: Identifier echoed in the done event

    Yields:
        DomainEvents in upstream order
    """
    message_id = message_id or gen_id("msg_")
    event_count = 0

    try:
        async for raw_event in upstream:
            event_count += 1
            if not isinstance(raw_event, dict):
                logger.warning("Skipping non-object upstream event #%d", event_count)
                continue
            try:
                translated = translate_event(raw_event, emit_thinking_with_text)
            except PydanticValidationError as e:
                logger.warning(
                    "Skipping malformed upstream event #%d: %s", event_count, e
                )
                continue
            for event in translated:
                yield event
    except Exception as e:
        logger.warning("Upstream stream failed after %d events: %s", event_count, e)
        yield ErrorEvent(error=str(e) or type(e).__name__)
        return

    logger.debug("Upstream stream completed: %d events", event_count)
    yield DoneEvent(data=DoneData(messageId=message_id))
