"""ExportRequest model."""

from pydantic import BaseModel, Field


class ExportRequest(BaseModel):
    conversationIds: list[str] = Field(default_factory=list)
