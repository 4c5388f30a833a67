"""
Get agent configuration endpoint.
"""

from fastapi import APIRouter

from ...state import get_agent_config

router = APIRouter()


@router.get("/agent-config")
async def get_agent_config_route() -> dict:
    """Get the active agent configuration and its source (file or env)."""
    config, source = get_agent_config()
    return {**config.model_dump(by_alias=True), "source": source}
