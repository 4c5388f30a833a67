"""
Health check endpoint.
"""

from fastapi import APIRouter

from storage import get_storage_provider

from ..state import get_agent_client, get_agent_config

router = APIRouter()


@router.get("/health")
async def health() -> dict:
    """Report agent configuration and storage backend."""
    config, source = get_agent_config()
    return {
        "status": "ok",
        "agent_configured": get_agent_client() is not None,
        "agentEngine": {
            "projectId": config.project_id or "not-set",
            "location": config.location,
            "resourceId": config.agent_id or "not-set",
            "source": source,
        },
        "storage": get_storage_provider().name,
    }
