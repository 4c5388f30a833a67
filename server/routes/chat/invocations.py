"""
Server-recorded turns endpoint.
"""

from fastapi import APIRouter, HTTPException

from ...state import find_recorder

router = APIRouter()


@router.get("/chat/{sessionId}/invocations")
async def get_recorded_invocations_route(sessionId: str) -> dict:
    """Get the turns the server recorded for a conversation."""
    recorder = find_recorder(sessionId)
    if recorder is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return {
        "sessionId": sessionId,
        "invocations": [invocation.to_storage() for invocation in recorder.invocations],
        "inProgress": recorder.in_progress,
        "lastError": recorder.last_error,
    }
