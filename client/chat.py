"""
Python client for the workbench chat API.

Drives the same flow as the browser: create a conversation, stream each turn
from ``POST /chat``, fold the frames into Invocations, and save the result.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from core.events import parse_domain_event
from core.exceptions import UpstreamError
from core.models import Invocation
from core.recorder import InvocationRecorder, TextListener, TimelineListener
from core.transport import FrameDecoder

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT_SECONDS = 300.0


class ChatClient:
    """
    Conversation-scoped client for a running workbench server.

    Args:
        base_url: Server root URL
        conversation_id: Existing conversation to continue; created on demand
        http_client: Shared httpx client; one is created and owned if omitted
        on_text: Called with the draft on every streamed text message
        on_timeline: Called with the draft on every tool call, result or thinking event
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        conversation_id: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        on_text: TextListener | None = None,
        on_timeline: TimelineListener | None = None,
    ) -> None:
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url, timeout=DEFAULT_TIMEOUT_SECONDS
        )
        self.conversation_id = conversation_id
        self.adk_session_id: str | None = None
        self.recorder = InvocationRecorder(
            conversation_id, on_text=on_text, on_timeline=on_timeline
        )

    async def __aenter__(self) -> "ChatClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    @property
    def invocations(self) -> list[Invocation]:
        return self.recorder.invocations

    async def create_session(self) -> str:
        """Start a new conversation on the server and return its ID."""
        response = await self._http.post("/session")
        if response.is_error:
            raise UpstreamError(
                f"Failed to create session: HTTP {response.status_code} {response.text}",
                status_code=response.status_code,
            )
        data = response.json()
        self.conversation_id = data["sessionId"]
        self.adk_session_id = data.get("adkSessionId")
        self.recorder.reset(self.conversation_id)
        logger.info("Started conversation %s", self.conversation_id)
        return self.conversation_id

    async def send_message(self, message: str) -> Invocation:
        """
        Stream one turn and return the sealed Invocation.

        Raises:
            UpstreamError: If the server reports an error or the stream ends
                without a done frame
        """
        if self.conversation_id is None:
            await self.create_session()

        self.recorder.begin(message)
        decoder = FrameDecoder()
        payload = {"message": message, "sessionId": self.conversation_id}

        try:
            sealed = await self._stream_turn(payload, decoder)
        except httpx.HTTPError as e:
            self.recorder.fail(str(e) or type(e).__name__)
            raise UpstreamError(f"Chat stream failed: {e}") from e
        if sealed is not None:
            return sealed

        for frame in decoder.close():
            sealed = self._apply_frame(frame)
            if sealed is not None:
                return sealed

        self.recorder.fail("Connection closed before the response completed")
        raise UpstreamError(self.recorder.last_error)

    async def _stream_turn(
        self, payload: dict[str, Any], decoder: FrameDecoder
    ) -> Invocation | None:
        async with self._http.stream("POST", "/chat", json=payload) as response:
            if response.is_error:
                body = (await response.aread()).decode("utf-8", errors="replace")
                self.recorder.fail(f"HTTP {response.status_code}: {body}")
                raise UpstreamError(
                    f"Chat request failed: HTTP {response.status_code} {body}",
                    status_code=response.status_code,
                )
            async for chunk in response.aiter_bytes():
                for frame in decoder.feed(chunk):
                    sealed = self._apply_frame(frame)
                    if sealed is not None:
                        return sealed
        return None

    def _apply_frame(self, frame: dict[str, Any]) -> Invocation | None:
        try:
            event = parse_domain_event(frame)
        except PydanticValidationError as e:
            logger.warning("Ignoring unrecognized frame: %s", e)
            return None
        sealed = self.recorder.apply(event)
        if event.type == "error":
            raise UpstreamError(event.error)
        return sealed

    async def save(self) -> dict[str, Any]:
        """Persist the recorded conversation and return the server's response."""
        if self.conversation_id is None:
            raise UpstreamError("No conversation to save")
        payload = {
            "conversationId": self.conversation_id,
            "invocations": [invocation.to_storage() for invocation in self.invocations],
        }
        response = await self._http.post("/conversations/save", json=payload)
        if response.is_error:
            raise UpstreamError(
                f"Save failed: HTTP {response.status_code} {response.text}",
                status_code=response.status_code,
            )
        return response.json()
