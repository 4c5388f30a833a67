"""
Shared pytest fixtures for all tests.
"""
import tempfile
from pathlib import Path
from typing import Iterator

import pytest

from helpers import FakeAgentClient, weather_stream
from storage import LocalStorage


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def local_storage(temp_dir: Path) -> LocalStorage:
    """Local storage rooted in a temporary directory."""
    return LocalStorage(temp_dir / "conversations_saved")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer environment settings out of the tests."""
    for name in (
        "AGENT_ENGINE_PROJECT_ID",
        "AGENT_ENGINE_LOCATION",
        "AGENT_ENGINE_RESOURCE_ID",
        "AGENT_ENGINE_ACCESS_TOKEN",
        "USE_CLOUD_STORAGE",
        "GCS_BUCKET_NAME",
        "GCS_PREFIX",
        "CONVERSATIONS_DIR",
        "SESSION_LOG_DIR",
        "SESSION_TTL_SECONDS",
        "MAX_SESSIONS",
        "WORKING_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def upstream_events() -> list[dict]:
    return weather_stream()


@pytest.fixture
def fake_agent(upstream_events) -> FakeAgentClient:
    """Fake upstream client replaying the weather stream."""
    return FakeAgentClient(upstream_events)


@pytest.fixture
def reset_sse_app_status():
    """sse-starlette keeps a module-level exit event bound to the first loop."""
    from sse_starlette.sse import AppStatus

    if hasattr(AppStatus, "should_exit_event"):
        AppStatus.should_exit_event = None
    yield
    if hasattr(AppStatus, "should_exit_event"):
        AppStatus.should_exit_event = None
