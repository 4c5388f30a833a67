"""
Save conversation endpoint.
"""

import logging

from fastapi import APIRouter, HTTPException

from core import StorageError, ValidationError
from core.conversations import parse_invocation_payload, save_conversation
from storage import get_storage_provider
from storage.base import validate_conversation_id

from ...requests import SaveConversationRequest
from ...state import find_recorder

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/conversations/save")
async def save_conversation_route(request: SaveConversationRequest) -> dict:
    """Save a conversation, overwriting any saved version with the same ID."""
    try:
        validate_conversation_id(request.conversationId)
        if request.invocations is not None:
            invocations = parse_invocation_payload(request.invocations)
        else:
            recorder = find_recorder(request.conversationId)
            if recorder is None:
                raise HTTPException(status_code=404, detail="Conversation not found")
            invocations = recorder.invocations
        is_update = await save_conversation(
            get_storage_provider(), request.conversationId, invocations
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        logger.error("Failed to save conversation %s: %s", request.conversationId, e)
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "success": True,
        "isUpdate": is_update,
        "savedAs": f"{request.conversationId}.json",
    }
