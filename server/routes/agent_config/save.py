"""
Save agent configuration endpoint.
"""

import logging

from fastapi import APIRouter, HTTPException

from config import save_agent_config

from ...requests import AgentConfigRequest
from ...state import install_agent_config

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/agent-config")
async def save_agent_config_route(request: AgentConfigRequest) -> dict:
    """Persist an agent configuration and switch the live client to it."""
    missing = request.missing_fields
    if missing:
        raise HTTPException(
            status_code=400,
            detail=f"Missing required fields: {', '.join(missing)}",
        )

    config = request.to_config()
    try:
        save_agent_config(config)
    except OSError as e:
        logger.error("Failed to save agent config: %s", e)
        raise HTTPException(status_code=500, detail="Failed to save agent configuration")

    await install_agent_config(config, "file")
    return {"success": True, "config": config.model_dump(by_alias=True)}
