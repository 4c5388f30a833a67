"""
Download raw saved conversation endpoint.
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from core import NotFoundError, StorageError, ValidationError
from core.conversations import get_raw_conversation
from storage import get_storage_provider

router = APIRouter()


@router.get("/conversations/saved/{conversationId}/raw")
async def get_raw_conversation_route(conversationId: str) -> JSONResponse:
    """Return the stored document unchanged, as a file download."""
    try:
        data = await get_raw_conversation(get_storage_provider(), conversationId)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found")
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return JSONResponse(
        content=data,
        headers={
            "Content-Disposition": f'attachment; filename="{conversationId}.json"'
        },
    )
