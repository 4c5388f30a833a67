"""
Chat endpoint with streaming.
"""

import logging
from typing import Any, AsyncGenerator

from fastapi import APIRouter, HTTPException
from sse_starlette.sse import EventSourceResponse
from starlette.background import BackgroundTask

from config import SSE_PING_INTERVAL_SECONDS
from core import ErrorEvent, InvalidOperationError, gen_id, translate_stream
from core.recorder import InvocationRecorder, TurnDraft
from core.session_log import SessionEventLog
from core.transport import frame_payload

from ...requests import ChatRequest
from ...state import get_agent_client, get_recorder, get_session_registry

logger = logging.getLogger(__name__)

router = APIRouter()

DISCONNECTED_MESSAGE = "Stream closed before the response completed"


def release_turn(recorder: InvocationRecorder, draft: TurnDraft) -> None:
    """Abort the turn opened for a request if its stream ended without a terminal event.

    Runs both when the event generator finishes and after the response closes,
    so a client that disconnects before the first frame still frees the
    conversation. A newer turn on the same recorder is left alone.
    """
    if recorder.in_progress and recorder.draft is draft:
        logger.warning("Chat stream for %s closed early", recorder.conversation_id)
        recorder.fail(DISCONNECTED_MESSAGE)


@router.post("/chat")
async def chat_route(request: ChatRequest) -> EventSourceResponse:
    """Send a user message and stream the translated agent events via SSE."""
    if not request.message.strip():
        raise HTTPException(status_code=400, detail="No message provided")

    client = get_agent_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Agent Engine is not configured")

    conversation_id = request.sessionId or gen_id()
    recorder = get_recorder(conversation_id)
    try:
        draft = recorder.begin(request.message)
    except InvalidOperationError as e:
        raise HTTPException(status_code=409, detail=str(e))

    session_log = SessionEventLog.from_env(conversation_id)
    session_log.write("request", {"message": request.message})
    logger.info(
        "Processing message for conversation %s: %r",
        conversation_id,
        request.message[:100],
    )

    async def upstream_events() -> AsyncGenerator[dict[str, Any], None]:
        adk_session_id = await get_session_registry().get_or_create(conversation_id)
        async for raw_event in client.stream_query(
            request.message, adk_session_id, conversation_id
        ):
            session_log.upstream(raw_event)
            yield raw_event

    async def stream_response() -> AsyncGenerator[dict, None]:
        try:
            async for event in translate_stream(
                upstream_events(),
                emit_thinking_with_text=request.emitThinkingWithText,
            ):
                recorder.apply(event)
                if isinstance(event, ErrorEvent):
                    session_log.error("stream", event.error)
                session_log.sent(event.model_dump(exclude_none=True, mode="json"))
                yield {"data": frame_payload(event)}
        finally:
            release_turn(recorder, draft)

    return EventSourceResponse(
        stream_response(),
        sep="\n",
        ping=SSE_PING_INTERVAL_SECONDS,
        background=BackgroundTask(release_turn, recorder, draft),
    )
