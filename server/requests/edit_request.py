"""EditRequest model."""

from pydantic import BaseModel


class EditRequest(BaseModel):
    invocationId: str
    newAgentMessage: str
