"""
Saved conversation route registration.
"""

from fastapi import FastAPI

from . import delete, edit, export, feedback, get, list, raw, save


def register_routes(app: FastAPI) -> None:
    """Register all saved conversation routes."""
    app.include_router(save.router)
    app.include_router(list.router)
    app.include_router(get.router)
    app.include_router(raw.router)
    app.include_router(edit.router)
    app.include_router(feedback.router)
    app.include_router(delete.router)
    app.include_router(export.router)
