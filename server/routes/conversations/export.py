"""
Evalset export endpoint.
"""

import logging

from fastapi import APIRouter, HTTPException

from core import NotFoundError, StorageError, ValidationError
from core.conversations import export_conversations
from storage import get_storage_provider

from ...logging_config import log_timing
from ...requests import ExportRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/conversations/export")
async def export_conversations_route(request: ExportRequest) -> dict:
    """Export saved conversations as an evalset; no IDs exports everything."""
    try:
        with log_timing(logger, "Evalset export", level=logging.INFO):
            evalset = await export_conversations(
                get_storage_provider(), request.conversationIds
            )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=404, detail="No conversations found to export")
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {
        "success": True,
        "evalset": evalset.to_document(),
        "count": len(evalset.eval_cases),
    }
