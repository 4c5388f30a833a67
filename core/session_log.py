"""
Per-session event log.

When SESSION_LOG_DIR is set, every upstream event, sent frame and stream
error of a chat session is appended as one JSON line, for replaying a
conversation's raw traffic while debugging.
"""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SESSION_LOG_DIR_ENV = "SESSION_LOG_DIR"


class SessionEventLog:
    """Appends JSON lines to ``session_<id>_<utc time>.jsonl``."""

    def __init__(self, session_id: str, log_dir: Path | str | None) -> None:
        self.session_id = session_id
        self.path: Path | None = None
        if log_dir:
            directory = Path(log_dir)
            stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
            self.path = directory / f"session_{session_id}_{stamp}.jsonl"
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.warning("Session log disabled, cannot create %s: %s", directory, e)
                self.path = None

    @classmethod
    def from_env(cls, session_id: str) -> "SessionEventLog":
        return cls(session_id, os.environ.get(SESSION_LOG_DIR_ENV))

    @property
    def enabled(self) -> bool:
        return self.path is not None

    def write(self, source: str, payload: Any) -> None:
        if self.path is None:
            return
        record = {
            "logged_at": datetime.now(timezone.utc).isoformat(),
            "session_id": self.session_id,
            "source": source,
            "payload": payload,
        }
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(record, default=str) + "\n")
        except OSError as e:
            logger.warning("Failed to write session log %s: %s", self.path, e)

    def upstream(self, raw_event: dict[str, Any]) -> None:
        self.write("upstream", raw_event)

    def sent(self, frame: dict[str, Any]) -> None:
        self.write("sent", frame)

    def error(self, context: str, message: str) -> None:
        self.write("error", {"context": context, "message": message})
