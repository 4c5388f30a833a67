"""Invocation model: one sealed user/agent exchange."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ToolCallRecord(BaseModel):
    """Flattened tool call kept for older readers of saved conversations."""

    model_config = ConfigDict(extra="allow")

    name: str
    args: Any = None
    result: Any = None


class Invocation(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    invocation_id: str
    user_message: str
    agent_message: str = ""
    timestamp: int
    tool_calls: list[ToolCallRecord] = Field(default_factory=list)
    events: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Ordered timeline of thinking, tool_call and tool_result events",
    )
    author: str | None = None
    custom_rating: int | None = Field(default=None, alias="_custom_rating", ge=1, le=5)
    custom_feedback: str | None = Field(default=None, alias="_custom_feedback")
    custom_original_agent_message: str | None = Field(
        default=None,
        alias="_custom_original_agent_message",
        description="Unedited agent text, captured once and never moved forward",
    )

    def to_storage(self) -> dict[str, Any]:
        """Serialize with the on-disk field names."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
