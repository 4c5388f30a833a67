"""
Create conversation endpoint.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException

from core import UpstreamError, gen_id

from ...state import get_agent_client, get_session_registry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/session")
async def create_session_route() -> dict:
    """Start a conversation backed by a fresh upstream session."""
    if get_agent_client() is None:
        raise HTTPException(status_code=503, detail="Agent Engine is not configured")

    conversation_id = gen_id()
    try:
        adk_session_id = await get_session_registry().create(conversation_id)
    except UpstreamError as e:
        logger.error("Failed to create session for %s: %s", conversation_id, e)
        raise HTTPException(status_code=502, detail=str(e))

    return {
        "sessionId": conversation_id,
        "adkSessionId": adk_session_id,
        "created": datetime.now(timezone.utc).isoformat(),
    }
