"""AgentEngineConfig model for configuration."""

from pydantic import BaseModel, ConfigDict, Field

from .defaults import AGENT_ENGINE_API_VERSION, DEFAULT_LOCATION


class AgentEngineConfig(BaseModel):
    """Identifies the deployed Agent Engine (reasoning engine) to query."""

    model_config = ConfigDict(populate_by_name=True)

    agent_id: str = Field(
        default="",
        alias="agentId",
        description="Reasoning engine resource ID",
    )
    project_id: str = Field(
        default="",
        alias="projectId",
        description="Google Cloud project ID",
    )
    location: str = Field(
        default=DEFAULT_LOCATION,
        description="Region the agent is deployed in",
    )

    @property
    def is_complete(self) -> bool:
        return bool(self.agent_id and self.project_id and self.location)

    @property
    def resource_name(self) -> str:
        return (
            f"projects/{self.project_id}/locations/{self.location}"
            f"/reasoningEngines/{self.agent_id}"
        )

    @property
    def base_url(self) -> str:
        return (
            f"https://{self.location}-aiplatform.googleapis.com/"
            f"{AGENT_ENGINE_API_VERSION}/{self.resource_name}"
        )

    @property
    def query_url(self) -> str:
        return f"{self.base_url}:query"

    @property
    def stream_query_url(self) -> str:
        return f"{self.base_url}:streamQuery?alt=sse"
