"""Google Cloud Storage uploader."""

import asyncio
import io
import threading
from typing import Any, Dict, Optional

from google.cloud import storage

from gcloud_storage.core.errors import StorageConfigurationError
from gcloud_storage.core.logging_config import get_logger
from gcloud_storage.storage.keys import build_object_key, generate_object_name, join_url_path
from gcloud_storage.storage.models import (
    PerRequestOptions,
    StorageConfiguration,
    UploadedFileMetadata,
)
from gcloud_storage.storage.options import build_stream_options, resolve_request_options


logger = get_logger(__name__)

GCS_PUBLIC_ENDPOINT = "https://storage.googleapis.com/"

# Stream options that are object properties rather than upload arguments
BLOB_PROPERTIES = (
    "metadata",
    "cache_control",
    "content_disposition",
    "content_encoding",
    "content_language",
)


def build_storage_url(
    object_key: str,
    storage_base_uri: Optional[str] = None,
    bucket_name: Optional[str] = None,
) -> str:
    """Build the public URL of an object. Pure, no I/O.

    Args:
        object_key: Object key within the bucket
        storage_base_uri: Custom base URI (e.g. a CDN); wins when set
        bucket_name: Bucket used for the default public endpoint

    Returns:
        str: Public URL of the object

    Raises:
        StorageConfigurationError: If neither a base URI nor a bucket name is given
    """
    if storage_base_uri:
        return join_url_path(storage_base_uri, object_key)

    if not bucket_name:
        raise StorageConfigurationError(
            f"Cannot build storage URL for '{object_key}': no bucket name configured"
        )

    return GCS_PUBLIC_ENDPOINT + join_url_path(bucket_name, object_key)


class GCloudStorageService:
    """Uploads in-memory files to a Google Cloud Storage bucket.

    One instance is built per process from an immutable ``StorageConfiguration``
    and shared by concurrent uploads; nothing on the instance is written during
    an upload except the lazily created client.

    The client is created on first use when not injected, so missing or
    invalid credentials surface on the first upload rather than here.
    """

    def __init__(
        self,
        config: StorageConfiguration,
        client: Optional[storage.Client] = None,
    ):
        """Initialize the uploader.

        Args:
            config: Process-wide storage configuration
            client: Optional pre-built storage client
        """
        self.config = config
        self._client = client
        self._client_lock = threading.Lock()
        self._bucket = client.bucket(config.default_bucket_name) if client is not None else None

        logger.info(
            "gcs_storage_service_initialized",
            bucket_name=config.default_bucket_name,
            project_id=config.project_id,
            storage_base_uri=config.storage_base_uri,
            credentials_source=self._credentials_source(),
        )

    def _credentials_source(self) -> str:
        """Name of the credential source used to build the client, for logging."""
        if self.config.credentials_info:
            return "inline"
        if self.config.key_filename:
            return "key_file"
        return "application_default"

    def _create_client(self) -> storage.Client:
        """Build a storage client from the configured credentials (may read key files)."""
        kwargs: Dict[str, Any] = {}
        if self.config.project_id:
            kwargs["project"] = self.config.project_id

        if self.config.credentials_info:
            return storage.Client.from_service_account_info(self.config.credentials_info, **kwargs)
        if self.config.key_filename:
            return storage.Client.from_service_account_json(self.config.key_filename, **kwargs)
        return storage.Client(**kwargs)

    @property
    def client(self) -> storage.Client:
        """Storage client, created once on first access.

        Creation can block on credential I/O, so upload only touches this
        from a worker thread.
        """
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = self._create_client()
        return self._client

    @property
    def bucket(self) -> storage.Bucket:
        """Handle for the configured default bucket (no network call)."""
        if self._bucket is None:
            self._bucket = self.client.bucket(self.config.default_bucket_name)
        return self._bucket

    def _bucket_for(self, bucket_name: str) -> storage.Bucket:
        """Default bucket handle, or a fresh handle for an overridden bucket name."""
        if bucket_name == self.config.default_bucket_name:
            return self.bucket
        return self.client.bucket(bucket_name)

    def _write_object(
        self,
        bucket_name: str,
        object_key: str,
        data: bytes,
        stream_options: Dict[str, Any],
    ) -> None:
        """Write ``data`` to ``object_key`` in a single request.

        Runs in a worker thread, including any lazy client creation.
        """
        blob = self._bucket_for(bucket_name).blob(object_key)

        upload_kwargs = dict(stream_options)
        for name in BLOB_PROPERTIES:
            if name in upload_kwargs:
                setattr(blob, name, upload_kwargs.pop(name))

        blob.upload_from_file(
            io.BytesIO(data),
            size=len(data),
            retry=None,
            **upload_kwargs,
        )

    async def upload(
        self,
        file_metadata: UploadedFileMetadata,
        per_request_options: Optional[PerRequestOptions] = None,
    ) -> str:
        """Upload a file under a newly generated object key.

        Args:
            file_metadata: File to store; its buffer must not be empty
            per_request_options: Optional overrides for this upload

        Returns:
            str: Public URL of the stored object

        Raises:
            ValueError: If the file buffer is empty
            Exception: Any error raised by the storage client, unchanged
        """
        if not file_metadata.buffer:
            raise ValueError("File buffer must not be empty")

        prefix = per_request_options.prefix if per_request_options else None
        object_key = build_object_key(generate_object_name(), prefix)

        resolved = resolve_request_options(self.config, per_request_options)
        stream_options = build_stream_options(resolved, file_metadata.mimetype)

        logger.debug(
            "gcs_upload_started",
            bucket_name=resolved.bucket_name,
            object_key=object_key,
            originalname=file_metadata.originalname,
            content_type=file_metadata.mimetype,
            size_bytes=len(file_metadata.buffer),
            predefined_acl=stream_options["predefined_acl"],
        )

        try:
            await asyncio.to_thread(
                self._write_object,
                resolved.bucket_name,
                object_key,
                file_metadata.buffer,
                stream_options,
            )
        except Exception as exc:
            logger.error(
                "gcs_upload_failed",
                bucket_name=resolved.bucket_name,
                object_key=object_key,
                error_type=type(exc).__name__,
                error=str(exc),
                exc_info=True,
            )
            raise

        url = build_storage_url(
            object_key,
            storage_base_uri=resolved.storage_base_uri,
            bucket_name=resolved.bucket_name,
        )

        logger.info(
            "gcs_upload_success",
            bucket_name=resolved.bucket_name,
            object_key=object_key,
            size_bytes=len(file_metadata.buffer),
            content_type=file_metadata.mimetype,
            storage_url=url,
        )

        return url

    def get_storage_url(
        self,
        object_key: str,
        per_request_options: Optional[PerRequestOptions] = None,
    ) -> str:
        """Get the public URL for an object key.

        A ``storage_base_uri`` override wins. Otherwise the default public
        endpoint is used with the override's bucket name, falling back to the
        configured default bucket.
        """
        if per_request_options and per_request_options.storage_base_uri:
            return build_storage_url(object_key, storage_base_uri=per_request_options.storage_base_uri)

        bucket_name = (
            per_request_options.default_bucket_name if per_request_options else None
        ) or self.config.default_bucket_name

        return build_storage_url(object_key, bucket_name=bucket_name)
