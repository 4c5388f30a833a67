"""
Delete saved conversation endpoint.
"""

from fastapi import APIRouter, HTTPException

from core import StorageError, ValidationError
from core.conversations import delete_conversation
from storage import get_storage_provider

router = APIRouter()


@router.delete("/conversations/saved/{conversationId}")
async def delete_conversation_route(conversationId: str) -> dict:
    """Delete a saved conversation. Succeeds if it was already gone."""
    try:
        await delete_conversation(get_storage_provider(), conversationId)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"success": True}
