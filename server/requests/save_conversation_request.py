"""SaveConversationRequest model."""

from typing import Any

from pydantic import BaseModel


class SaveConversationRequest(BaseModel):
    conversationId: str
    # Omitted: save the turns the server recorded for this conversation
    invocations: list[dict[str, Any]] | None = None
