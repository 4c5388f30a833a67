"""
Agent Engine integration.

HTTP client for the deployed agent and the bearer token providers it uses.
"""

from .auth import (
    GoogleAuthTokenProvider,
    StaticTokenProvider,
    TokenProvider,
    default_token_provider,
)
from .client import AgentEngineClient, describe_upstream_error

__all__ = [
    "AgentEngineClient",
    "describe_upstream_error",
    "TokenProvider",
    "StaticTokenProvider",
    "GoogleAuthTokenProvider",
    "default_token_provider",
]
