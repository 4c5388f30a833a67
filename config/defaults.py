"""Default configuration values."""

# Agent Engine
DEFAULT_LOCATION = "us-central1"
AGENT_CONFIG_FILENAME = ".agent-config.json"
AGENT_ENGINE_API_VERSION = "v1"
DEFAULT_UPSTREAM_TIMEOUT_SECONDS = 300.0
DEFAULT_USER_ID = "default-user"
CONFIG_TEST_USER_ID = "config-test-user"

# Storage
DEFAULT_CONVERSATIONS_DIR = "conversations_saved"
DEFAULT_GCS_PREFIX = "conversations"

# Session registry
DEFAULT_SESSION_TTL_SECONDS = 24 * 60 * 60
DEFAULT_MAX_SESSIONS = 1000

# Streaming
SSE_PING_INTERVAL_SECONDS = 15
