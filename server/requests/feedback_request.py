"""FeedbackRequest model."""

from typing import Any

from pydantic import BaseModel


class FeedbackRequest(BaseModel):
    conversationId: str
    invocationId: str
    # Range and type are checked by core.recorder.validate_rating
    rating: Any = None
    feedback: str | None = None
