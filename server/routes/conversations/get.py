"""
Get saved conversation endpoint.
"""

from fastapi import APIRouter, HTTPException

from core import NotFoundError, StorageError, ValidationError
from core.conversations import load_conversation
from storage import get_storage_provider

router = APIRouter()


@router.get("/conversations/saved/{conversationId}")
async def get_conversation_route(conversationId: str) -> dict:
    """Get the invocations of a saved conversation."""
    try:
        invocations = await load_conversation(get_storage_provider(), conversationId)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found")
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"invocations": [invocation.to_storage() for invocation in invocations]}
