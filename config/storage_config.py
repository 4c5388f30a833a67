"""StorageConfig model."""

from typing import Literal

from pydantic import BaseModel, Field

from .defaults import DEFAULT_CONVERSATIONS_DIR, DEFAULT_GCS_PREFIX


class StorageConfig(BaseModel):
    """Where saved conversations live."""

    backend: Literal["local", "gcs"] = Field(
        default="local",
        description="Storage backend: local filesystem or Cloud Storage",
    )
    base_dir: str = Field(
        default=DEFAULT_CONVERSATIONS_DIR,
        description="Directory for the local backend",
    )
    bucket: str | None = Field(
        default=None,
        description="Bucket name for the Cloud Storage backend",
    )
    prefix: str = Field(
        default=DEFAULT_GCS_PREFIX,
        description="Object name prefix for the Cloud Storage backend",
    )
