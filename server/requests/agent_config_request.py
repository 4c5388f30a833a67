"""AgentConfigRequest model."""

from pydantic import BaseModel

from config import AgentEngineConfig


class AgentConfigRequest(BaseModel):
    agentId: str = ""
    projectId: str = ""
    location: str = ""

    @property
    def missing_fields(self) -> list[str]:
        return [
            name
            for name in ("agentId", "projectId", "location")
            if not getattr(self, name).strip()
        ]

    def to_config(self) -> AgentEngineConfig:
        return AgentEngineConfig(
            agent_id=self.agentId.strip(),
            project_id=self.projectId.strip(),
            location=self.location.strip(),
        )
