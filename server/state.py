"""
Server-side state management.

Holds the live Agent Engine client, the upstream session registry and the
per-conversation recorders. Storage is managed in storage/__init__.py.
"""

import logging
from typing import Any, Callable

from agent_engine import AgentEngineClient
from config import AgentEngineConfig
from config.loader import ConfigSource
from core.exceptions import UpstreamError
from core.recorder import InvocationRecorder
from core.sessions import InMemorySessionStore, SessionRegistry

from .logging_config import timed

logger = logging.getLogger(__name__)

AgentClientFactory = Callable[[AgentEngineConfig], Any]


# =============================================================================
# Agent Engine Client
# =============================================================================

_agent_client: Any = None
_agent_config: AgentEngineConfig = AgentEngineConfig()
_agent_config_source: ConfigSource = "env"
_agent_client_factory: AgentClientFactory = AgentEngineClient


def set_agent_client(client: Any) -> None:
    """Set the Agent Engine client used by the chat routes."""
    global _agent_client
    _agent_client = client


def get_agent_client() -> Any:
    """Get the current Agent Engine client (None when unconfigured)."""
    return _agent_client


def set_agent_client_factory(factory: AgentClientFactory) -> None:
    """Set how clients are built from a configuration."""
    global _agent_client_factory
    _agent_client_factory = factory


def build_agent_client(config: AgentEngineConfig) -> Any:
    """Build a new client for config without installing it."""
    return _agent_client_factory(config)


def get_agent_config() -> tuple[AgentEngineConfig, ConfigSource]:
    """Get the active configuration and where it came from."""
    return _agent_config, _agent_config_source


async def install_agent_config(config: AgentEngineConfig, source: ConfigSource) -> None:
    """
    Make config the active agent configuration.

    The previous client is closed and cached upstream sessions are dropped,
    since they belong to the previous agent. An incomplete configuration
    leaves the server without a client.
    """
    global _agent_config, _agent_config_source
    previous = _agent_client
    _agent_config, _agent_config_source = config, source

    if config.is_complete:
        set_agent_client(build_agent_client(config))
        logger.info("Agent Engine configured from %s: %s", source, config.resource_name)
    else:
        set_agent_client(None)
        logger.warning(
            "Agent Engine not configured. Set AGENT_ENGINE_PROJECT_ID and "
            "AGENT_ENGINE_RESOURCE_ID or save a configuration."
        )

    get_session_registry().clear()
    if previous is not None:
        await previous.aclose()


async def close_agent_client() -> None:
    client = _agent_client
    set_agent_client(None)
    if client is not None:
        await client.aclose()


# =============================================================================
# Upstream Sessions
# =============================================================================


@timed("Upstream session create", level=logging.INFO)
async def create_upstream_session(conversation_id: str) -> str:
    """Create an upstream session for a conversation with the live client."""
    client = get_agent_client()
    if client is None:
        raise UpstreamError("Agent Engine is not configured")
    return await client.create_session(conversation_id)


_session_registry: SessionRegistry = SessionRegistry(create_upstream_session)


def set_session_registry(registry: SessionRegistry) -> None:
    global _session_registry
    _session_registry = registry


def get_session_registry() -> SessionRegistry:
    return _session_registry


def configure_session_registry(
    ttl_seconds: float | None, max_sessions: int | None
) -> SessionRegistry:
    """Replace the registry with one using the given reuse policy."""
    registry = SessionRegistry(
        create_upstream_session,
        InMemorySessionStore(ttl_seconds=ttl_seconds, max_entries=max_sessions),
    )
    set_session_registry(registry)
    return registry


# =============================================================================
# Server-side Recording
# =============================================================================

_recorders: dict[str, InvocationRecorder] = {}


def get_recorder(conversation_id: str) -> InvocationRecorder:
    """Get the recorder for a conversation, creating an empty one if needed."""
    recorder = _recorders.get(conversation_id)
    if recorder is None:
        recorder = _recorders[conversation_id] = InvocationRecorder(conversation_id)
    return recorder


def find_recorder(conversation_id: str) -> InvocationRecorder | None:
    return _recorders.get(conversation_id)


def clear_recorders() -> None:
    _recorders.clear()

