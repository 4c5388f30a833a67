"""ConversationMetadata model."""

from pydantic import BaseModel


class ConversationMetadata(BaseModel):
    id: str
    filename: str
    preview: str
    timestamp: int
    invocationCount: int
