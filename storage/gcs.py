"""Google Cloud Storage provider.

Stores conversations as JSON blobs at ``gs://<bucket>/<prefix>/<id>.json``.
The google-cloud-storage client is synchronous, so every call runs in the
default executor.
"""

from __future__ import annotations

import asyncio
import json
import logging
from functools import partial
from typing import Any, Callable, TypeVar

from google.api_core import exceptions as gcs_exceptions
from google.cloud import storage as gcs

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

DEFAULT_BUCKET_NAME = "feedback-workbench-conversations"
DEFAULT_PREFIX = "conversations"
JSON_CONTENT_TYPE = "application/json"

T = TypeVar("T")


class GCSStorage:
    """Conversation storage in a Cloud Storage bucket."""

    name = "gcs"

    def __init__(
        self,
        bucket_name: str | None = None,
        prefix: str = DEFAULT_PREFIX,
        client: gcs.Client | None = None,
    ) -> None:
        self.bucket_name = bucket_name or DEFAULT_BUCKET_NAME
        self.prefix = prefix.strip("/")
        self.client = client or gcs.Client()
        self.bucket = self.client.bucket(self.bucket_name)
        logger.info(
            "GCS storage initialized with bucket %s, prefix %s",
            self.bucket_name,
            self.prefix,
        )

    def _blob_name(self, conversation_id: str) -> str:
        validate_conversation_id(conversation_id)
        return f"{self.prefix}/{conversation_id}{FILE_SUFFIX}"

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, partial(func, *args))
        except gcs_exceptions.NotFound:
            raise
        except gcs_exceptions.GoogleAPIError as e:
            raise StorageError(f"Cloud Storage request failed: {e}") from e

    async def _download_json(self, blob: Any, conversation_id: str) -> Any:
        try:
            content = await self._run(blob.download_as_text)
        except gcs_exceptions.NotFound:
            raise NotFoundError("Conversation", conversation_id)
        except ValueError as e:
            raise StorageError(f"Undecodable content in {blob.name}: {e}") from e
        try:
            return json.loads(content)
        except ValueError as e:
            raise StorageError(f"Invalid JSON in {blob.name}: {e}") from e

    async def save(self, conversation_id: str, invocations: list[Invocation]) -> bool:
        blob = self.bucket.blob(self._blob_name(conversation_id))
        is_update = await self._run(blob.exists)
        blob.metadata = {
            "conversationId": conversation_id,
            "timestamp": str(now_ms()),
            "invocationCount": str(len(invocations)),
        }
        content = json.dumps(serialize_invocations(invocations), indent=2)
        await self._run(
            partial(blob.upload_from_string, content, content_type=JSON_CONTENT_TYPE)
        )
        logger.info(
            "Saved conversation %s to gs://%s/%s",
            conversation_id,
            self.bucket_name,
            blob.name,
        )
        return is_update

    async def load(self, conversation_id: str) -> list[Invocation]:
        blob = self.bucket.blob(self._blob_name(conversation_id))
        data = await self._download_json(blob, conversation_id)
        try:
            return parse_invocations(data)
        except ValueError as e:
            raise StorageError(f"Invalid conversation {conversation_id}: {e}") from e

    async def list(self) -> list[ConversationMetadata]:
        blobs = await self._run(
            lambda: list(self.client.list_blobs(self.bucket_name, prefix=f"{self.prefix}/"))
        )
        entries = [blob for blob in blobs if blob.name.endswith(FILE_SUFFIX)]
        conversations = await asyncio.gather(*(self._describe(blob) for blob in entries))
        return sort_newest_first(list(conversations))

    async def _describe(self, blob: Any) -> ConversationMetadata:
        conversation_id = blob.name.rsplit("/", 1)[-1][: -len(FILE_SUFFIX)]
        created = blob.time_created
        fallback = int(created.timestamp() * 1000) if created else now_ms()
        try:
            data = await self._download_json(blob, conversation_id)
            return build_metadata(conversation_id, data, fallback)
        except (StorageError, NotFoundError) as e:
            logger.warning("Error processing %s: %s", blob.name, e)
            return placeholder_metadata(conversation_id, fallback)

    async def delete(self, conversation_id: str) -> None:
        blob = self.bucket.blob(self._blob_name(conversation_id))
        try:
            await self._run(blob.delete)
            logger.info("Deleted conversation %s", conversation_id)
        except gcs_exceptions.NotFound:
            logger.debug("Conversation %s already absent", conversation_id)

    async def exists(self, conversation_id: str) -> bool:
        blob = self.bucket.blob(self._blob_name(conversation_id))
        return await self._run(blob.exists)

    async def get_raw(self, conversation_id: str) -> Any:
        blob = self.bucket.blob(self._blob_name(conversation_id))
        return await self._download_json(blob, conversation_id)
