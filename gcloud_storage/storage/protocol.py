"""Uploader protocol definition."""

from typing import Optional, Protocol

from gcloud_storage.storage.models import PerRequestOptions, UploadedFileMetadata


class FileUploader(Protocol):
    """Protocol defining the interface for file uploaders.

    Lets HTTP handlers and tests depend on the upload contract instead of a
    concrete cloud client.
    """

    async def upload(
        self,
        file_metadata: UploadedFileMetadata,
        per_request_options: Optional[PerRequestOptions] = None,
    ) -> str:
        """Store the file under a generated object key.

        Args:
            file_metadata: File to store
            per_request_options: Optional overrides for this upload

        Returns:
            str: Public URL of the stored object
        """
        ...

    def get_storage_url(
        self,
        object_key: str,
        per_request_options: Optional[PerRequestOptions] = None,
    ) -> str:
        """Get the public URL for an object key.

        Args:
            object_key: Object key within the bucket
            per_request_options: Optional overrides (base URI, bucket name)

        Returns:
            str: URL to access the object
        """
        ...
