"""
Tests for configuration loading.
"""
import json

from config import (
    AgentEngineConfig,
    delete_agent_config,
    load_agent_config,
    load_session_config,
    load_storage_config,
    save_agent_config,
)


class TestAgentConfig:
    def test_env_fallback(self, temp_dir, monkeypatch):
        monkeypatch.setenv("AGENT_ENGINE_PROJECT_ID", "env-project")
        monkeypatch.setenv("AGENT_ENGINE_RESOURCE_ID", "987")

        config, source = load_agent_config(temp_dir)

        assert source == "env"
        assert config.project_id == "env-project"
        assert config.agent_id == "987"
        assert config.location == "us-central1"
        assert config.is_complete

    def test_file_takes_precedence(self, temp_dir, monkeypatch):
        monkeypatch.setenv("AGENT_ENGINE_PROJECT_ID", "env-project")
        (temp_dir / ".agent-config.json").write_text(
            json.dumps({"agentId": "1", "projectId": "file-project", "location": "asia-east1"})
        )

        config, source = load_agent_config(temp_dir)

        assert source == "file"
        assert config.project_id == "file-project"
        assert config.location == "asia-east1"

    def test_invalid_file_ignored(self, temp_dir):
        (temp_dir / ".agent-config.json").write_text("[1, 2]")

        _, source = load_agent_config(temp_dir)

        assert source == "env"

    def test_unconfigured(self, temp_dir):
        config, _ = load_agent_config(temp_dir)

        assert not config.is_complete

    def test_save_and_delete(self, temp_dir):
        config = AgentEngineConfig(agent_id="5", project_id="p", location="us-east4")

        path = save_agent_config(config, temp_dir)

        assert json.loads(path.read_text()) == {
            "agentId": "5",
            "projectId": "p",
            "location": "us-east4",
        }
        assert load_agent_config(temp_dir) == (config, "file")
        assert delete_agent_config(temp_dir) is True
        assert delete_agent_config(temp_dir) is False

    def test_working_dir_env(self, temp_dir, monkeypatch):
        monkeypatch.setenv("WORKING_DIR", str(temp_dir))
        save_agent_config(AgentEngineConfig(agent_id="5", project_id="p"))

        assert (temp_dir / ".agent-config.json").exists()


class TestStorageConfig:
    def test_gcs_when_bucket_set(self, monkeypatch):
        monkeypatch.setenv("GCS_BUCKET_NAME", "my-bucket")
        monkeypatch.setenv("GCS_PREFIX", "prod")

        config = load_storage_config()

        assert config.backend == "gcs"
        assert config.bucket == "my-bucket"
        assert config.prefix == "prod"

    def test_falls_back_to_local_without_bucket(self, caplog):
        config = load_storage_config()

        assert config.backend == "local"
        assert "falling back to local storage" in caplog.text

    def test_local_when_cloud_disabled(self, monkeypatch, caplog):
        monkeypatch.setenv("USE_CLOUD_STORAGE", "false")
        monkeypatch.setenv("GCS_BUCKET_NAME", "ignored")
        monkeypatch.setenv("CONVERSATIONS_DIR", "/tmp/saved")

        config = load_storage_config()

        assert config.backend == "local"
        assert config.base_dir == "/tmp/saved"
        assert "falling back" not in caplog.text


class TestSessionConfig:
    def test_defaults(self):
        config = load_session_config()

        assert config.ttl_seconds == 24 * 60 * 60
        assert config.max_sessions == 1000

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SESSION_TTL_SECONDS", "60")
        monkeypatch.setenv("MAX_SESSIONS", "0")

        config = load_session_config()

        assert config.ttl_seconds == 60
        assert config.max_sessions is None

    def test_invalid_values_ignored(self, monkeypatch):
        monkeypatch.setenv("SESSION_TTL_SECONDS", "soon")

        assert load_session_config().ttl_seconds == 24 * 60 * 60
