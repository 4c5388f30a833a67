"""
Route registration for the workbench API.
"""

from fastapi import FastAPI

from . import agent_config, chat, conversations, health


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application."""
    app.include_router(health.router)
    chat.register_routes(app)
    conversations.register_routes(app)
    agent_config.register_routes(app)
