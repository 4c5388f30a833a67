"""
List saved conversations endpoint.
"""

import logging

from fastapi import APIRouter, HTTPException

from core import StorageError
from core.conversations import list_conversations
from storage import get_storage_provider

from ...logging_config import log_timing

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/conversations/saved")
async def list_conversations_route() -> dict:
    """List saved conversations, newest first."""
    try:
        with log_timing(logger, "List saved conversations"):
            conversations = await list_conversations(get_storage_provider())
    except StorageError as e:
        logger.error("Failed to list conversations: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    return {"conversations": [meta.model_dump() for meta in conversations]}
