"""
Conversation storage.

Two interchangeable backends behind the StorageProvider protocol: a local
directory of JSON files and a Cloud Storage bucket.
"""

import logging

from config import StorageConfig, load_storage_config

from .base import (
    ERROR_PREVIEW,
    StorageProvider,
    normalize_invocations,
    validate_conversation_id,
)
from .local import LocalStorage

logger = logging.getLogger(__name__)

_storage: StorageProvider | None = None


def create_storage_provider(config: StorageConfig) -> StorageProvider:
    """Build the provider described by config."""
    if config.backend == "gcs":
        # Imported here so local deployments don't need Cloud credentials at import
        from .gcs import GCSStorage

        logger.info("Using Google Cloud Storage bucket %s", config.bucket)
        return GCSStorage(bucket_name=config.bucket, prefix=config.prefix)
    logger.info("Using local filesystem storage in %s", config.base_dir)
    return LocalStorage(config.base_dir)


def get_storage_provider() -> StorageProvider:
    """Get the process-wide storage provider, creating it from the environment."""
    global _storage
    if _storage is None:
        _storage = create_storage_provider(load_storage_config())
    return _storage


def set_storage_provider(provider: StorageProvider | None) -> None:
    """Replace the process-wide storage provider (None resets it)."""
    global _storage
    _storage = provider


__all__ = [
    "ERROR_PREVIEW",
    "StorageProvider",
    "LocalStorage",
    "create_storage_provider",
    "get_storage_provider",
    "set_storage_provider",
    "normalize_invocations",
    "validate_conversation_id",
]
