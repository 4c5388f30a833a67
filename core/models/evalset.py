"""Evaluation set export models."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class Content(BaseModel):
    parts: list[dict[str, Any]]
    role: Literal["user", "model"]


class InvocationEvent(BaseModel):
    author: str
    content: Content


class IntermediateData(BaseModel):
    invocation_events: list[InvocationEvent] = Field(default_factory=list)


class EvalTurn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    invocation_id: str
    user_content: Content
    final_response: Content
    intermediate_data: IntermediateData | None = None
    custom_rating: int | None = Field(default=None, alias="_custom_rating")
    custom_feedback: str | None = Field(default=None, alias="_custom_feedback")
    custom_original_agent_message: str | None = Field(
        default=None, alias="_custom_original_agent_message"
    )


class EvalCase(BaseModel):
    eval_id: str
    conversation: list[EvalTurn]


class EvalSet(BaseModel):
    eval_set_id: str
    name: str
    eval_cases: list[EvalCase] = Field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        """Serialize with the field names evaluation tooling expects."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
