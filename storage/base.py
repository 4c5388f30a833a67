"""Storage provider protocol and shared helpers."""

from __future__ import annotations

import re
from typing import Any, Protocol

from core.exceptions import StorageError, ValidationError
from core.models import ConversationMetadata, Invocation

CONVERSATION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
FILE_SUFFIX = ".json"
PREVIEW_LENGTH = 100
EMPTY_PREVIEW = "No messages"
ERROR_PREVIEW = "Error loading conversation"


class StorageProvider(Protocol):
    """Durable store for conversations, one entry per conversation ID."""

    name: str

    async def save(self, conversation_id: str, invocations: list[Invocation]) -> bool:
        """Overwrite the stored array. Returns True if an entry already existed."""
        ...

    async def load(self, conversation_id: str) -> list[Invocation]:
        """Load a conversation. Raises NotFoundError if absent."""
        ...

    async def list(self) -> list[ConversationMetadata]:
        """Metadata for every stored conversation, newest first."""
        ...

    async def delete(self, conversation_id: str) -> None:
        """Delete a conversation. Succeeds if it is already absent."""
        ...

    async def exists(self, conversation_id: str) -> bool:
        """Check whether a conversation is stored."""
        ...

    async def get_raw(self, conversation_id: str) -> Any:
        """Stored JSON exactly as persisted. Raises NotFoundError if absent."""
        ...


def validate_conversation_id(conversation_id: str) -> str:
    """
    Check a conversation ID before it is used as a storage key.

    Raises:
        ValidationError: If the ID is empty or contains anything other than
            letters, digits, hyphen and underscore
    """
    if not isinstance(conversation_id, str) or not CONVERSATION_ID_PATTERN.match(
        conversation_id
    ):
        raise ValidationError("Invalid conversationId format")
    return conversation_id


def normalize_invocations(data: Any) -> list[dict[str, Any]]:
    """
    Accept both persisted shapes and return the canonical array.

    Older files store ``{"invocations": [...]}``; current files store the bare
    array.

    Raises:
        StorageError: If data is neither shape
    """
    if isinstance(data, dict) and isinstance(data.get("invocations"), list):
        data = data["invocations"]
    if not isinstance(data, list):
        raise StorageError("Stored conversation is not an invocation array")
    return data


def parse_invocations(data: Any) -> list[Invocation]:
    """Validate stored JSON into Invocation models."""
    return [Invocation.model_validate(item) for item in normalize_invocations(data)]


def serialize_invocations(invocations: list[Invocation]) -> list[dict[str, Any]]:
    return [invocation.to_storage() for invocation in invocations]


def build_metadata(
    conversation_id: str, data: Any, fallback_timestamp: int
) -> ConversationMetadata:
    """
    Derive listing metadata from stored JSON.

    Raises:
        StorageError: If data is not a recognised conversation shape
    """
    items = normalize_invocations(data)
    preview = EMPTY_PREVIEW
    timestamp = fallback_timestamp
    if items and isinstance(items[0], dict):
        first = items[0]
        user_message = first.get("user_message")
        if isinstance(user_message, str) and user_message:
            preview = user_message[:PREVIEW_LENGTH]
            if len(user_message) > PREVIEW_LENGTH:
                preview += "..."
        if isinstance(first.get("timestamp"), (int, float)):
            timestamp = int(first["timestamp"])
    return ConversationMetadata(
        id=conversation_id,
        filename=f"{conversation_id}{FILE_SUFFIX}",
        preview=preview,
        timestamp=timestamp,
        invocationCount=len(items),
    )


def placeholder_metadata(conversation_id: str, timestamp: int) -> ConversationMetadata:
    """Listing entry for a conversation whose content could not be read."""
    return ConversationMetadata(
        id=conversation_id,
        filename=f"{conversation_id}{FILE_SUFFIX}",
        preview=ERROR_PREVIEW,
        timestamp=timestamp,
        invocationCount=0,
    )


def sort_newest_first(
    conversations: list[ConversationMetadata],
) -> list[ConversationMetadata]:
    return sorted(conversations, key=lambda c: c.timestamp, reverse=True)
