"""ChatRequest model."""

from pydantic import BaseModel


class ChatRequest(BaseModel):
    message: str = ""
    sessionId: str | None = None
    # Also emit a thinking event for parts that carry text and a signature
    emitThinkingWithText: bool = False
