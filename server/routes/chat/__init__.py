"""
Chat route registration.
"""

from fastapi import FastAPI

from . import invocations, send, session


def register_routes(app: FastAPI) -> None:
    """Register all chat routes."""
    app.include_router(session.router)
    app.include_router(send.router)
    app.include_router(invocations.router)
