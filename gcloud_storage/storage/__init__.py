"""Upload layer for Google Cloud Storage."""

from functools import lru_cache
from .protocol import FileUploader
from .gcs import GCloudStorageService, build_storage_url
from .models import (
    PerRequestOptions,
    StorageConfiguration,
    UploadedFileMetadata,
    WriteStreamOptions,
)


@lru_cache()
def get_storage_service() -> FileUploader:
    """Factory function for the process-wide uploader.

    Built once from settings and kept for the lifetime of the process.

    Returns:
        FileUploader: Configured uploader instance
    """
    from gcloud_storage.core.config import settings

    return GCloudStorageService(settings.storage_configuration())


__all__ = [
    "get_storage_service",
    "build_storage_url",
    "FileUploader",
    "GCloudStorageService",
    "PerRequestOptions",
    "StorageConfiguration",
    "UploadedFileMetadata",
    "WriteStreamOptions",
]
