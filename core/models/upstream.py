"""Upstream Agent Engine event models.

These mirror the JSON objects the streaming query endpoint emits. Unknown
fields are kept so the raw payload survives validation untouched.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FunctionCall(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    name: str
    args: dict[str, Any] = Field(default_factory=dict)


class FunctionResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    name: str
    response: Any = None


class UpstreamPart(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: str | None = None
    function_call: FunctionCall | None = None
    function_response: FunctionResponse | None = None
    thought_signature: str | None = None


class UpstreamContent(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: str | None = None
    parts: list[UpstreamPart] = Field(default_factory=list)


class UsageMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    prompt_token_count: int | None = None
    candidates_token_count: int | None = None
    thoughts_token_count: int | None = None
    total_token_count: int | None = None


class UpstreamEvent(BaseModel):
    model_config = ConfigDict(extra="allow")

    author: str | None = None
    content: UpstreamContent | None = None
    usage_metadata: UsageMetadata | None = None
