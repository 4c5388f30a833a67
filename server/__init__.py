"""
Annotation workbench API server.

Streams Agent Engine answers to the browser and stores annotated
conversations for evaluation.
"""

from .app import app
from .routes import register_routes
from .state import (
    get_agent_client,
    get_session_registry,
    install_agent_config,
    set_agent_client,
)

# Register all routes with the app
register_routes(app)

__all__ = [
    "app",
    "set_agent_client",
    "get_agent_client",
    "get_session_registry",
    "install_agent_config",
]
