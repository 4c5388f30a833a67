"""
Frame encoding and incremental decoding.

The server sends one server-sent-event frame per DomainEvent
(``data: <json>\\n\\n``). Clients receive arbitrary byte chunks and must
reassemble frames that span reads. The same line buffering decodes the
upstream Agent Engine stream, which is newline-delimited JSON that may also
arrive ``data:`` prefixed.
"""

import codecs
import json
import logging
from typing import Any, AsyncGenerator, AsyncIterable

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DATA_PREFIX = "data:"


def frame_payload(event: BaseModel) -> str:
    """JSON body of the frame for one DomainEvent."""
    return event.model_dump_json(exclude_none=True)


def encode_frame(event: BaseModel) -> str:
    """Full text frame for one DomainEvent."""
    return f"{DATA_PREFIX} {frame_payload(event)}\n\n"


class _LineBuffer:
    """Splits an incrementally decoded UTF-8 byte stream into complete lines."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.closed = False

    def _lines(self, chunk: bytes | str, final: bool = False) -> list[str]:
        if isinstance(chunk, bytes):
            self._buffer += self._decoder.decode(chunk, final=final)
        else:
            self._buffer += chunk
        lines = self._buffer.split("\n")
        # Last element is an incomplete line, carried over to the next read
        self._buffer = lines.pop()
        if final and self._buffer:
            lines.append(self._buffer)
            self._buffer = ""
        return [line.rstrip("\r") for line in lines]

    @staticmethod
    def _parse_json(text: str) -> dict[str, Any] | None:
        try:
            value = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("Skipping malformed frame %r: %s", text[:200], e)
            return None
        if not isinstance(value, dict):
            logger.warning("Skipping non-object frame %r", text[:200])
            return None
        return value


class FrameDecoder(_LineBuffer):
    """
    Incremental decoder for the server-sent-event frames of /chat.

    feed() returns every frame completed by the chunk; close() flushes a
    trailing frame that was not terminated by a blank line and marks the
    connection as done. Comment lines (keep-alive pings) and non-data fields
    are ignored.
    """

    def __init__(self) -> None:
        super().__init__()
        self._data_lines: list[str] = []

    def feed(self, chunk: bytes | str) -> list[dict[str, Any]]:
        return self._consume(self._lines(chunk))

    def close(self) -> list[dict[str, Any]]:
        frames = self._consume(self._lines(b"", final=True))
        frames.extend(self._dispatch())
        self.closed = True
        return frames

    def _consume(self, lines: list[str]) -> list[dict[str, Any]]:
        frames: list[dict[str, Any]] = []
        for line in lines:
            if not line:
                frames.extend(self._dispatch())
            elif line.startswith(":"):
                continue
            elif line.startswith(DATA_PREFIX):
                value = line[len(DATA_PREFIX):]
                self._data_lines.append(value[1:] if value.startswith(" ") else value)
        return frames

    def _dispatch(self) -> list[dict[str, Any]]:
        if not self._data_lines:
            return []
        text = "\n".join(self._data_lines)
        self._data_lines = []
        frame = self._parse_json(text)
        return [frame] if frame is not None else []


class UpstreamLineDecoder(_LineBuffer):
    """Incremental decoder for the upstream newline-delimited JSON stream."""

    def feed(self, chunk: bytes | str) -> list[dict[str, Any]]:
        return self._consume(self._lines(chunk))

    def close(self) -> list[dict[str, Any]]:
        events = self._consume(self._lines(b"", final=True))
        self.closed = True
        return events

    def _consume(self, lines: list[str]) -> list[dict[str, Any]]:
        events: list[dict[str, Any]] = []
        for line in lines:
            text = line.strip()
            if not text or text.startswith(":"):
                continue
            if text.startswith(DATA_PREFIX):
                text = text[len(DATA_PREFIX):].strip()
            event = self._parse_json(text)
            if event is not None:
                events.append(event)
        return events


async def iter_frames(
    chunks: AsyncIterable[bytes],
) -> AsyncGenerator[dict[str, Any], None]:
    """
    Decode frames from an async byte stream.

    Every complete frame in a chunk is yielded before the next chunk is read.
    The generator ends when the byte stream closes.
    """
    decoder = FrameDecoder()
    async for chunk in chunks:
        for frame in decoder.feed(chunk):
            yield frame
    for frame in decoder.close():
        yield frame
