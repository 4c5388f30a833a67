"""
Test builders shared across test modules.
"""
from typing import Any, AsyncGenerator

from core.exceptions import UpstreamError
from core.models import Invocation


def make_invocation(
    invocation_id: str = "inv_1",
    user_message: str = "What is the weather in Paris?",
    agent_message: str = "It is sunny.",
    timestamp: int = 1_700_000_000_000,
    **extra: Any,
) -> Invocation:
    """Build a sealed invocation with sensible defaults."""
    return Invocation(
        invocation_id=invocation_id,
        user_message=user_message,
        agent_message=agent_message,
        timestamp=timestamp,
        **extra,
    )


def text_event(text: str, author: str = "weather_agent", **part: Any) -> dict:
    """Upstream event with a single text part."""
    return {"author": author, "content": {"role": "model", "parts": [{"text": text, **part}]}}


def tool_call_event(name: str, args: dict, call_id: str | None = "fc_1") -> dict:
    call = {"name": name, "args": args}
    if call_id:
        call["id"] = call_id
    return {
        "author": "weather_agent",
        "content": {"role": "model", "parts": [{"function_call": call}]},
    }


def tool_result_event(name: str, response: Any, call_id: str | None = "fc_1") -> dict:
    result = {"name": name, "response": response}
    if call_id:
        result["id"] = call_id
    return {
        "author": "weather_agent",
        "content": {"role": "user", "parts": [{"function_response": result}]},
    }


def weather_stream() -> list[dict]:
    """A typical upstream stream: thinking, tool round trip, then the answer."""
    return [
        {
            "author": "weather_agent",
            "content": {"role": "model", "parts": [{"thought_signature": "sig-abc"}]},
            "usage_metadata": {"thoughts_token_count": 42, "total_token_count": 120},
        },
        tool_call_event("get_weather", {"city": "Paris"}),
        tool_result_event("get_weather", {"forecast": "sunny"}),
        text_event("It is sunny in Paris."),
    ]


class FakeAgentClient:
    """Stands in for AgentEngineClient; replays scripted upstream events."""

    def __init__(
        self,
        events: list[dict] | None = None,
        fail_after: int | None = None,
        session_error: Exception | None = None,
    ) -> None:
        self.events = events or []
        self.fail_after = fail_after
        self.session_error = session_error
        self.created_sessions: list[str] = []
        self.queries: list[tuple[str, str, str]] = []
        self.closed = False
        self.tested = False

    async def create_session(self, user_id: str) -> str:
        if self.session_error is not None:
            raise self.session_error
        self.created_sessions.append(user_id)
        return f"adk-{len(self.created_sessions)}"

    async def stream_query(
        self, message: str, session_id: str, user_id: str
    ) -> AsyncGenerator[dict, None]:
        self.queries.append((message, session_id, user_id))
        for index, event in enumerate(self.events):
            if self.fail_after is not None and index == self.fail_after:
                raise UpstreamError("Agent Engine HTTP 500: backend unavailable", 500)
            yield event
        if self.fail_after is not None and self.fail_after >= len(self.events):
            raise UpstreamError("Agent Engine HTTP 500: backend unavailable", 500)

    async def test_connection(self) -> str:
        self.tested = True
        return await self.create_session("config-test-user")

    async def aclose(self) -> None:
        self.closed = True
