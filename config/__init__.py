"""
Configuration module for the annotation workbench.

Exports the configuration models and loaders used throughout the application.
"""

from .agent_config import AgentEngineConfig
from .defaults import (
    AGENT_CONFIG_FILENAME,
    CONFIG_TEST_USER_ID,
    DEFAULT_LOCATION,
    DEFAULT_UPSTREAM_TIMEOUT_SECONDS,
    DEFAULT_USER_ID,
    SSE_PING_INTERVAL_SECONDS,
)
from .loader import (
    agent_config_path,
    delete_agent_config,
    get_working_directory,
    load_agent_config,
    load_config_file,
    load_session_config,
    load_storage_config,
    save_agent_config,
)
from .session_config import SessionConfig
from .storage_config import StorageConfig

__all__ = [
    # Constants
    "AGENT_CONFIG_FILENAME",
    "CONFIG_TEST_USER_ID",
    "DEFAULT_LOCATION",
    "DEFAULT_UPSTREAM_TIMEOUT_SECONDS",
    "DEFAULT_USER_ID",
    "SSE_PING_INTERVAL_SECONDS",
    # Config models
    "AgentEngineConfig",
    "StorageConfig",
    "SessionConfig",
    # Loader functions
    "agent_config_path",
    "load_config_file",
    "load_agent_config",
    "save_agent_config",
    "delete_agent_config",
    "load_storage_config",
    "load_session_config",
    "get_working_directory",
]
