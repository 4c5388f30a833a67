"""
Edit agent message endpoint.
"""

import logging

from fastapi import APIRouter, HTTPException

from core import NotFoundError, StorageError, ValidationError
from core.conversations import edit_invocation
from storage import get_storage_provider

from ...requests import EditRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.put("/conversations/saved/{conversationId}/edit")
async def edit_invocation_route(conversationId: str, request: EditRequest) -> dict:
    """Replace the agent message of a saved invocation."""
    try:
        await edit_invocation(
            get_storage_provider(),
            conversationId,
            request.invocationId,
            request.newAgentMessage,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        logger.debug("Edit target not found: %s", e)
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"success": True}
