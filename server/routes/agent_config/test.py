"""
Test agent configuration endpoint.
"""

import logging

from fastapi import APIRouter, HTTPException

from core import UpstreamError

from ...requests import AgentConfigRequest
from ...state import build_agent_client

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/agent-config/test")
async def test_agent_config_route(request: AgentConfigRequest) -> dict:
    """Check a candidate configuration by creating a throwaway upstream session.

    The candidate never replaces the live client.
    """
    if request.missing_fields:
        raise HTTPException(status_code=400, detail="Missing required fields")

    config = request.to_config()
    client = build_agent_client(config)
    try:
        await client.test_connection()
    except UpstreamError as e:
        logger.warning("Agent config test failed for %s: %s", config.resource_name, e)
        if e.status_code == 401:
            raise HTTPException(
                status_code=401,
                detail={"error": "Authentication failed", "details": str(e)},
            )
        if e.status_code is not None:
            raise HTTPException(
                status_code=400,
                detail={"error": "Configuration validation failed", "details": str(e)},
            )
        raise HTTPException(
            status_code=502,
            detail={"error": "Connection test failed", "details": str(e)},
        )
    finally:
        await client.aclose()

    logger.info("Agent config test succeeded for %s", config.resource_name)
    return {"success": True, "message": "Successfully connected and validated agent"}
