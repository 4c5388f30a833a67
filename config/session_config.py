"""SessionConfig model."""

from pydantic import BaseModel, Field

from .defaults import DEFAULT_MAX_SESSIONS, DEFAULT_SESSION_TTL_SECONDS


class SessionConfig(BaseModel):
    """Upstream session reuse policy."""

    ttl_seconds: float | None = Field(
        default=DEFAULT_SESSION_TTL_SECONDS,
        description="Seconds an upstream session is reused; None keeps it forever",
    )
    max_sessions: int | None = Field(
        default=DEFAULT_MAX_SESSIONS,
        description="Least recently used sessions are evicted beyond this count",
    )
