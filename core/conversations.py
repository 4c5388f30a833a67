"""
Saved conversation operations.

Provides the transport-agnostic operations behind the conversation endpoints:
save, load, list, annotate, delete and export. Every mutation rewrites the
whole invocation array.
"""

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from storage.base import StorageProvider, validate_conversation_id

from .exceptions import NotFoundError, StorageError, ValidationError
from .export import build_evalset
from .models import ConversationMetadata, EvalSet, Invocation
from .recorder import apply_feedback, edit_agent_message

logger = logging.getLogger(__name__)


def parse_invocation_payload(items: list[dict[str, Any]]) -> list[Invocation]:
    """
    Validate client-submitted invocations.

    Invocations without an original-message snapshot get one from their
    current agent message.

    Raises:
        ValidationError: If an item is not a valid invocation
    """
    invocations = []
    for index, item in enumerate(items):
        try:
            invocation = Invocation.model_validate(item)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid invocation at index {index}: {e}") from e
        if invocation.custom_original_agent_message is None:
            invocation.custom_original_agent_message = invocation.agent_message
        invocations.append(invocation)
    return invocations


async def save_conversation(
    storage: StorageProvider, conversation_id: str, invocations: list[Invocation]
) -> bool:
    """
    Save a conversation, replacing any stored version.

    Returns:
        True if an existing conversation was updated, False if it was created
    """
    validate_conversation_id(conversation_id)
    existed = await storage.exists(conversation_id)
    await storage.save(conversation_id, invocations)
    logger.info(
        "%s conversation %s with %d invocations",
        "Updated" if existed else "Created",
        conversation_id,
        len(invocations),
    )
    return existed


async def load_conversation(
    storage: StorageProvider, conversation_id: str
) -> list[Invocation]:
    """
    Load a saved conversation.

    Raises:
        ValidationError: If the ID is malformed
        NotFoundError: If the conversation doesn't exist
    """
    validate_conversation_id(conversation_id)
    return await storage.load(conversation_id)


async def list_conversations(storage: StorageProvider) -> list[ConversationMetadata]:
    """List saved conversations, newest first."""
    return await storage.list()


async def get_raw_conversation(storage: StorageProvider, conversation_id: str) -> Any:
    validate_conversation_id(conversation_id)
    return await storage.get_raw(conversation_id)


async def delete_conversation(storage: StorageProvider, conversation_id: str) -> None:
    """Delete a saved conversation. Deleting an absent conversation succeeds."""
    validate_conversation_id(conversation_id)
    await storage.delete(conversation_id)


async def edit_invocation(
    storage: StorageProvider,
    conversation_id: str,
    invocation_id: str,
    new_agent_message: str,
) -> Invocation:
    """
    Replace the agent message of one saved invocation.

    Raises:
        NotFoundError: If the conversation or invocation doesn't exist
    """
    invocations = await load_conversation(storage, conversation_id)
    invocation = edit_agent_message(invocations, invocation_id, new_agent_message)
    await storage.save(conversation_id, invocations)
    logger.info("Edited invocation %s in %s", invocation_id, conversation_id)
    return invocation


async def update_feedback(
    storage: StorageProvider,
    conversation_id: str,
    invocation_id: str,
    rating: int | None = None,
    feedback: str | None = None,
) -> Invocation:
    """
    Upsert the rating and/or feedback of one saved invocation.

    Raises:
        ValidationError: If the rating is out of range
        NotFoundError: If the conversation or invocation doesn't exist
    """
    invocations = await load_conversation(storage, conversation_id)
    invocation = apply_feedback(invocations, invocation_id, rating, feedback)
    await storage.save(conversation_id, invocations)
    logger.info("Updated feedback for invocation %s in %s", invocation_id, conversation_id)
    return invocation


async def export_conversations(
    storage: StorageProvider, conversation_ids: list[str] | None = None
) -> EvalSet:
    """
    Export conversations as an evalset.

    Args:
        conversation_ids: Conversations to export; empty or None exports all

    Raises:
        ValidationError: If an ID is malformed
        NotFoundError: If nothing matched
    """
    if conversation_ids:
        ids = [validate_conversation_id(cid) for cid in conversation_ids]
    else:
        ids = [meta.id for meta in await storage.list()]
        if not ids:
            raise NotFoundError("Conversations", "no saved conversations")

    conversations = []
    for conversation_id in ids:
        try:
            conversations.append(await storage.load(conversation_id))
        except (NotFoundError, StorageError) as e:
            logger.warning("Skipping conversation %s in export: %s", conversation_id, e)

    if not conversations:
        raise NotFoundError("Conversations", ", ".join(ids))

    evalset = build_evalset(conversations)
    logger.info(
        "Exported %d conversations as %d eval cases",
        len(conversations),
        len(evalset.eval_cases),
    )
    return evalset
