"""
Bearer token providers for Agent Engine requests.

Token acquisition is delegated to google-auth application default
credentials; a static token can be supplied for tests and local tooling.
"""

import asyncio
import logging
import os
from typing import Any, Protocol

import google.auth
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request

from core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"
ACCESS_TOKEN_ENV = "AGENT_ENGINE_ACCESS_TOKEN"
AUTH_HINT = "Please run: gcloud auth application-default login"


class TokenProvider(Protocol):
    """Returns a bearer token for the next request."""

    async def get_token(self) -> str:
        ...


class StaticTokenProvider:
    """Always returns the same token."""

    def __init__(self, token: str) -> None:
        self.token = token

    async def get_token(self) -> str:
        return self.token


class GoogleAuthTokenProvider:
    """
    Application default credentials, refreshed when expired.

    google-auth is blocking, so loading and refreshing run in the default
    executor. A lock keeps concurrent requests from refreshing twice.
    """

    def __init__(self, scopes: list[str] | None = None) -> None:
        self.scopes = scopes or [CLOUD_PLATFORM_SCOPE]
        self._credentials: Any = None
        self._lock = asyncio.Lock()

    def _refresh(self) -> str:
        if self._credentials is None:
            self._credentials, project = google.auth.default(scopes=self.scopes)
            logger.debug("Loaded application default credentials (project=%s)", project)
        if not self._credentials.valid:
            self._credentials.refresh(Request())
        return self._credentials.token

    async def get_token(self) -> str:
        async with self._lock:
            if self._credentials is not None and self._credentials.valid:
                return self._credentials.token
            loop = asyncio.get_running_loop()
            try:
                return await loop.run_in_executor(None, self._refresh)
            except GoogleAuthError as e:
                logger.error("Failed to get auth token: %s", e)
                raise UpstreamError(
                    f"Failed to get auth token. {AUTH_HINT}", status_code=401
                ) from e


def default_token_provider() -> TokenProvider:
    """Static token from AGENT_ENGINE_ACCESS_TOKEN if set, else google-auth."""
    token = os.environ.get(ACCESS_TOKEN_ENV)
    if token:
        return StaticTokenProvider(token)
    return GoogleAuthTokenProvider()
