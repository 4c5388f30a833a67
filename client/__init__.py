"""Client for a running workbench server."""

from .chat import DEFAULT_BASE_URL, ChatClient

__all__ = ["ChatClient", "DEFAULT_BASE_URL"]
