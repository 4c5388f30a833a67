"""
Agent Engine HTTP client.

Talks to a deployed Vertex AI Agent Engine (reasoning engine): creates ADK
sessions through the ``:query`` endpoint and streams answers from
``:streamQuery``. The client is built from an explicit configuration value;
changing configuration means constructing a new client.
"""

import json
import logging
from typing import Any, AsyncGenerator

import httpx

from config import CONFIG_TEST_USER_ID, DEFAULT_UPSTREAM_TIMEOUT_SECONDS, DEFAULT_USER_ID
from config import AgentEngineConfig
from core.exceptions import UpstreamError
from core.transport import UpstreamLineDecoder

from .auth import TokenProvider, default_token_provider

logger = logging.getLogger(__name__)

CREATE_SESSION_METHOD = "async_create_session"
STREAM_QUERY_METHOD = "async_stream_query"
CONNECT_TIMEOUT_SECONDS = 10.0
MAX_ERROR_BODY = 2000


def describe_upstream_error(
    status_code: int, body: str, config: AgentEngineConfig | None = None
) -> str:
    """Human-readable explanation of a failed Agent Engine response."""
    if "NOT_FOUND" in body or status_code == 404:
        if config is not None:
            return (
                f"Agent ID '{config.agent_id}' not found in project "
                f"'{config.project_id}' at location '{config.location}'"
            )
        return "Agent not found"
    if "PERMISSION_DENIED" in body or status_code == 403:
        return (
            "Permission denied. Check your GCP project access and ensure the agent exists."
        )
    if "INVALID_ARGUMENT" in body or status_code == 400:
        return "Invalid agent configuration. Check Agent ID, Project ID, and Location."
    try:
        message = json.loads(body).get("error", {}).get("message")
    except (json.JSONDecodeError, AttributeError):
        message = None
    return message or f"Agent Engine HTTP {status_code}: {body[:MAX_ERROR_BODY]}"


class AgentEngineClient:
    """
    Async client for one Agent Engine deployment.

    Args:
        config: Which agent to talk to
        token_provider: Source of bearer tokens (defaults to google-auth)
        http_client: Shared httpx client; one is created and owned if omitted
        timeout: Read timeout in seconds for upstream responses
    """

    def __init__(
        self,
        config: AgentEngineConfig,
        token_provider: TokenProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_UPSTREAM_TIMEOUT_SECONDS,
    ) -> None:
        if not config.is_complete:
            raise ValueError(
                "Missing Agent Engine configuration. Set AGENT_ENGINE_PROJECT_ID and "
                "AGENT_ENGINE_RESOURCE_ID or configure the agent in settings."
            )
        self.config = config
        self.token_provider = token_provider or default_token_provider()
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=CONNECT_TIMEOUT_SECONDS)
        )
        logger.info("Agent Engine client initialized for %s", config.resource_name)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _headers(self) -> dict[str, str]:
        token = await self.token_provider.get_token()
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    async def create_session(self, user_id: str) -> str:
        """
        Create an ADK session for a user.

        Returns:
            The session ID (not the full resource path)

        Raises:
            UpstreamError: If the request fails or the response has no session ID
        """
        payload = {"class_method": CREATE_SESSION_METHOD, "input": {"user_id": user_id}}
        logger.debug("Creating ADK session for user %s", user_id)
        try:
            response = await self._http.post(
                self.config.query_url, json=payload, headers=await self._headers()
            )
        except httpx.HTTPError as e:
            raise UpstreamError(f"Failed to create session: {e}") from e

        if response.is_error:
            logger.error(
                "Failed to create session: HTTP %d %s",
                response.status_code,
                response.text[:MAX_ERROR_BODY],
            )
            raise UpstreamError(
                describe_upstream_error(response.status_code, response.text, self.config),
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except json.JSONDecodeError as e:
            raise UpstreamError(f"Invalid session response: {e}") from e
        session_id = (data.get("output") or {}).get("id") if isinstance(data, dict) else None
        if not session_id:
            raise UpstreamError(f"No session ID in response: {json.dumps(data)[:MAX_ERROR_BODY]}")

        logger.info("Created ADK session %s for user %s", session_id, user_id)
        return session_id

    async def stream_query(
        self,
        message: str,
        session_id: str,
        user_id: str = DEFAULT_USER_ID,
    ) -> AsyncGenerator[dict[str, Any], None]:
        """
        Stream a query and yield decoded upstream events.

        Lines that are not valid JSON objects are skipped with a warning.
        Closing the generator closes the upstream connection.

        Raises:
            UpstreamError: On a non-2xx response or a transport failure
        """
        payload = {
            "class_method": STREAM_QUERY_METHOD,
            "input": {"message": message, "user_id": user_id, "session_id": session_id},
        }
        logger.info(
            "Streaming query for session %s (user %s): %r",
            session_id,
            user_id,
            message[:100],
        )
        decoder = UpstreamLineDecoder()
        event_count = 0
        try:
            async with self._http.stream(
                "POST",
                self.config.stream_query_url,
                json=payload,
                headers=await self._headers(),
            ) as response:
                if response.is_error:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    logger.error("Agent Engine HTTP %d: %s", response.status_code, body[:MAX_ERROR_BODY])
                    raise UpstreamError(
                        f"Agent Engine HTTP {response.status_code}: {body[:MAX_ERROR_BODY]}",
                        status_code=response.status_code,
                    )
                async for chunk in response.aiter_bytes():
                    for event in decoder.feed(chunk):
                        event_count += 1
                        yield event
                for event in decoder.close():
                    event_count += 1
                    yield event
        except httpx.HTTPError as e:
            raise UpstreamError(f"Agent Engine stream failed: {e}") from e
        logger.debug("Upstream stream for session %s completed: %d events", session_id, event_count)

    async def test_connection(self) -> str:
        """
        Verify the configuration by creating a throwaway session.

        Returns:
            The created session ID

        Raises:
            UpstreamError: With a readable explanation when the agent is unreachable
        """
        return await self.create_session(CONFIG_TEST_USER_ID)
