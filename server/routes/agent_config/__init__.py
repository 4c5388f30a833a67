"""
Agent configuration route registration.
"""

from fastapi import FastAPI

from . import delete, get, save, test


def register_routes(app: FastAPI) -> None:
    """Register all agent configuration routes."""
    app.include_router(get.router)
    app.include_router(save.router)
    app.include_router(delete.router)
    app.include_router(test.router)
