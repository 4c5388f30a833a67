"""
Workbench server entry point.
"""
import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_agent_config, load_session_config, load_storage_config
from server import app
from server.logging_config import setup_logging
from server.state import (
    close_agent_client,
    configure_session_registry,
    install_agent_config,
)
from storage import create_storage_provider, set_storage_provider

# Initialize logging before anything else
setup_logging()
logger = logging.getLogger(__name__)

# Constants
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire storage, session reuse and the Agent Engine client from config."""
    logger.info("Starting annotation workbench server")

    storage_config = load_storage_config()
    set_storage_provider(create_storage_provider(storage_config))
    logger.info("Storage backend: %s", storage_config.backend)

    session_config = load_session_config()
    configure_session_registry(session_config.ttl_seconds, session_config.max_sessions)
    logger.info(
        "Session reuse: ttl=%s max=%s",
        session_config.ttl_seconds,
        session_config.max_sessions,
    )

    agent_config, source = load_agent_config()
    await install_agent_config(agent_config, source)

    yield

    logger.info("Shutting down Agent Engine client...")
    await close_agent_client()


app.router.lifespan_context = lifespan


def main() -> None:
    """Start the workbench server."""
    host = os.environ.get("HOST", DEFAULT_HOST)
    port = int(os.environ.get("PORT", str(DEFAULT_PORT)))

    logger.info("Server listening on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
