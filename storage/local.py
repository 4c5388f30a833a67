"""Local filesystem storage.

Stores each conversation as ``<base_dir>/<conversation_id>.json``.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from core.exceptions import NotFoundError, StorageError
from core.models import ConversationMetadata, Invocation, now_ms

from .base import (
    FILE_SUFFIX,
    build_metadata,
    parse_invocations,
    placeholder_metadata,
    serialize_invocations,
    sort_newest_first,
    validate_conversation_id,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_DIR = Path("conversations_saved")


class LocalStorage:
    """Conversation storage in a local directory."""

    name = "local"

    def __init__(self, base_dir: Path | str | None = None) -> None:
        self.base_dir = Path(base_dir or DEFAULT_BASE_DIR).resolve()
        self.ensure_directory()

    def ensure_directory(self) -> Path:
        """Create the storage directory if it doesn't exist."""
        if not self.base_dir.exists():
            self.base_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Created conversation directory: %s", self.base_dir)
        return self.base_dir

    def _path(self, conversation_id: str) -> Path:
        validate_conversation_id(conversation_id)
        return self.base_dir / f"{conversation_id}{FILE_SUFFIX}"

    def _read_json(self, path: Path) -> Any:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise NotFoundError("Conversation", path.stem)
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read {path.name}: {e}") from e

    async def save(self, conversation_id: str, invocations: list[Invocation]) -> bool:
        path = self._path(conversation_id)
        self.ensure_directory()
        is_update = path.exists()
        content = json.dumps(serialize_invocations(invocations), indent=2)
        tmp_path = path.with_suffix(f"{FILE_SUFFIX}.tmp")
        try:
            tmp_path.write_text(content, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Failed to save {path.name}: {e}") from e
        logger.info(
            "%s conversation %s (%d invocations)",
            "Updated" if is_update else "Saved",
            conversation_id,
            len(invocations),
        )
        return is_update

    async def load(self, conversation_id: str) -> list[Invocation]:
        data = self._read_json(self._path(conversation_id))
        try:
            return parse_invocations(data)
        except ValueError as e:
            raise StorageError(f"Invalid conversation {conversation_id}: {e}") from e

    async def list(self) -> list[ConversationMetadata]:
        self.ensure_directory()
        conversations = []
        for path in self.base_dir.glob(f"*{FILE_SUFFIX}"):
            conversation_id = path.stem
            mtime_ms = now_ms()
            try:
                mtime_ms = int(path.stat().st_mtime * 1000)
                data = self._read_json(path)
                conversations.append(build_metadata(conversation_id, data, mtime_ms))
            except (StorageError, NotFoundError, OSError) as e:
                logger.warning("Error processing %s: %s", path.name, e)
                conversations.append(placeholder_metadata(conversation_id, mtime_ms))
        return sort_newest_first(conversations)

    async def delete(self, conversation_id: str) -> None:
        path = self._path(conversation_id)
        try:
            path.unlink()
            logger.info("Deleted conversation %s", conversation_id)
        except FileNotFoundError:
            logger.debug("Conversation %s already absent", conversation_id)
        except OSError as e:
            raise StorageError(f"Failed to delete {path.name}: {e}") from e

    async def exists(self, conversation_id: str) -> bool:
        return self._path(conversation_id).exists()

    async def get_raw(self, conversation_id: str) -> Any:
        return self._read_json(self._path(conversation_id))
