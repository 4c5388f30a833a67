"""Configuration loading utilities."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import ValidationError

from .agent_config import AgentEngineConfig
from .defaults import AGENT_CONFIG_FILENAME, DEFAULT_LOCATION
from .session_config import SessionConfig
from .storage_config import StorageConfig

logger = logging.getLogger(__name__)

ConfigSource = Literal["file", "env"]

# Environment variable names
PROJECT_ID_ENV = "AGENT_ENGINE_PROJECT_ID"
LOCATION_ENV = "AGENT_ENGINE_LOCATION"
RESOURCE_ID_ENV = "AGENT_ENGINE_RESOURCE_ID"
USE_CLOUD_STORAGE_ENV = "USE_CLOUD_STORAGE"
GCS_BUCKET_ENV = "GCS_BUCKET_NAME"
GCS_PREFIX_ENV = "GCS_PREFIX"
CONVERSATIONS_DIR_ENV = "CONVERSATIONS_DIR"
SESSION_TTL_ENV = "SESSION_TTL_SECONDS"
MAX_SESSIONS_ENV = "MAX_SESSIONS"


def get_working_directory() -> str:
    """
    Get the working directory from environment or default to cwd.

    Returns:
        The working directory path as a string
    """
    return os.environ.get("WORKING_DIR", os.getcwd())


def agent_config_path(project_root: Path | None = None) -> Path:
    """Path of the agent configuration file written by the settings endpoint."""
    root = project_root or Path(get_working_directory())
    return root / AGENT_CONFIG_FILENAME


def load_config_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON config file from the given path.

    Args:
        path: Path to the config file

    Returns:
        Parsed config dictionary or None if the file doesn't exist or is invalid
    """
    if not path.exists():
        return None

    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a JSON object", path)
        return None
    return data


def load_agent_config(
    project_root: Path | None = None,
) -> tuple[AgentEngineConfig, ConfigSource]:
    """
    Load the Agent Engine configuration.

    The config file in the working directory takes precedence; otherwise the
    AGENT_ENGINE_* environment variables are used.

    Returns:
        The configuration and where it came from ("file" or "env")
    """
    data = load_config_file(agent_config_path(project_root))
    if data is not None:
        try:
            return AgentEngineConfig.model_validate(data), "file"
        except ValidationError as e:
            logger.warning("Invalid agent config file, using environment: %s", e)

    return (
        AgentEngineConfig(
            agent_id=os.environ.get(RESOURCE_ID_ENV, ""),
            project_id=os.environ.get(PROJECT_ID_ENV, ""),
            location=os.environ.get(LOCATION_ENV, DEFAULT_LOCATION),
        ),
        "env",
    )


def save_agent_config(
    config: AgentEngineConfig, project_root: Path | None = None
) -> Path:
    """Write the agent configuration file."""
    path = agent_config_path(project_root)
    path.write_text(json.dumps(config.model_dump(by_alias=True), indent=2))
    logger.info("Saved agent config to %s", path)
    return path


def delete_agent_config(project_root: Path | None = None) -> bool:
    """
    Remove the agent configuration file so environment variables apply again.

    Returns:
        True if a file was deleted, False if none existed
    """
    path = agent_config_path(project_root)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    logger.info("Deleted agent config %s", path)
    return True


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in ("false", "0", "no", "off")


def _env_number(name: str, cast: type) -> Any:
    value = os.environ.get(name)
    if value is None or value == "":
        return None
    try:
        return cast(value)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", name, value)
        return None


def load_storage_config() -> StorageConfig:
    """
    Build the storage configuration from the environment.

    Cloud Storage is used by default when a bucket is configured. If cloud
    storage is requested without a bucket, local storage is used instead.
    """
    use_cloud = _env_flag(USE_CLOUD_STORAGE_ENV, True)
    bucket = os.environ.get(GCS_BUCKET_ENV) or None
    base_dir = os.environ.get(CONVERSATIONS_DIR_ENV) or StorageConfig().base_dir
    prefix = os.environ.get(GCS_PREFIX_ENV) or StorageConfig().prefix

    if use_cloud and bucket:
        return StorageConfig(backend="gcs", bucket=bucket, prefix=prefix, base_dir=base_dir)
    if use_cloud:
        logger.warning(
            "Cloud storage enabled but %s not set, falling back to local storage "
            "(set %s=false to silence this warning)",
            GCS_BUCKET_ENV,
            USE_CLOUD_STORAGE_ENV,
        )
    return StorageConfig(backend="local", base_dir=base_dir, prefix=prefix)


def load_session_config() -> SessionConfig:
    """Build the session reuse policy from the environment."""
    config = SessionConfig()
    ttl = _env_number(SESSION_TTL_ENV, float)
    max_sessions = _env_number(MAX_SESSIONS_ENV, int)
    if ttl is not None:
        config.ttl_seconds = ttl if ttl > 0 else None
    if max_sessions is not None:
        config.max_sessions = max_sessions if max_sessions > 0 else None
    return config
