"""
Rating and feedback endpoint.
"""

import logging

from fastapi import APIRouter, HTTPException

from core import NotFoundError, StorageError, ValidationError
from core.conversations import update_feedback
from storage import get_storage_provider

from ...requests import FeedbackRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/conversations/feedback")
async def feedback_route(request: FeedbackRequest) -> dict:
    """Set the rating and/or written feedback of a saved invocation."""
    try:
        await update_feedback(
            get_storage_provider(),
            request.conversationId,
            request.invocationId,
            rating=request.rating,
            feedback=request.feedback,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        logger.debug("Feedback target not found: %s", e)
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"success": True}
