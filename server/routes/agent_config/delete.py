"""
Delete agent configuration endpoint.
"""

import logging

from fastapi import APIRouter, HTTPException

from config import delete_agent_config, load_agent_config

from ...state import install_agent_config

logger = logging.getLogger(__name__)

router = APIRouter()


@router.delete("/agent-config")
async def delete_agent_config_route() -> dict:
    """Remove the saved configuration and fall back to environment variables."""
    try:
        deleted = delete_agent_config()
    except OSError as e:
        logger.error("Failed to delete agent config: %s", e)
        raise HTTPException(
            status_code=500, detail="Failed to delete agent configuration"
        )

    config, source = load_agent_config()
    await install_agent_config(config, source)
    message = (
        "Config file deleted, using environment variables"
        if deleted
        else "Config file already doesn't exist"
    )
    return {"success": True, "message": message}
