"""
Pytest configuration and shared fixtures for gcloud-storage-uploader tests.

This module provides:
- Storage configuration fixtures
- A mocked google-cloud-storage client (no network)
- Uploader fixtures
- API client fixtures
"""

from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from gcloud_storage.storage import (
    GCloudStorageService,
    StorageConfiguration,
    UploadedFileMetadata,
)


# ============================================================================
# Storage fixtures
# ============================================================================

@pytest.fixture
def storage_config() -> StorageConfiguration:
    """Default storage configuration pointing at a test bucket."""
    return StorageConfiguration(
        key_filename="/secrets/test-key.json",
        default_bucket_name="test-bucket",
    )


@pytest.fixture
def mock_gcs_client() -> MagicMock:
    """Mock storage client whose buckets hand out one mock blob per object key.

    Created blobs are recorded on ``bucket.blobs`` keyed by object key, and
    buckets on ``client.buckets`` keyed by name.
    """
    client = MagicMock(name="storage.Client")
    client.buckets = {}

    def make_bucket(name: str) -> MagicMock:
        if name not in client.buckets:
            bucket = MagicMock(name=f"Bucket({name})")
            bucket.name = name
            bucket.blobs = {}

            def make_blob(object_key: str) -> MagicMock:
                blob = MagicMock(name=f"Blob({object_key})")
                blob.name = object_key
                bucket.blobs[object_key] = blob
                return blob

            bucket.blob.side_effect = make_blob
            client.buckets[name] = bucket
        return client.buckets[name]

    client.bucket.side_effect = make_bucket
    return client


@pytest.fixture
def storage_service(storage_config: StorageConfiguration, mock_gcs_client: MagicMock) -> GCloudStorageService:
    """Uploader bound to the mocked client."""
    return GCloudStorageService(storage_config, client=mock_gcs_client)


# ============================================================================
# Test data fixtures
# ============================================================================

@pytest.fixture
def sample_png_bytes() -> bytes:
    """Minimal PNG signature plus a few bytes of payload."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 24


@pytest.fixture
def sample_file(sample_png_bytes: bytes) -> UploadedFileMetadata:
    """An uploaded PNG as received from a multipart form."""
    return UploadedFileMetadata(
        fieldname="file",
        originalname="avatar.png",
        encoding="7bit",
        mimetype="image/png",
        buffer=sample_png_bytes,
        size=len(sample_png_bytes),
    )


def only_blob(bucket: MagicMock) -> MagicMock:
    """Return the single blob created on ``bucket``."""
    assert len(bucket.blobs) == 1, f"expected one blob, got {list(bucket.blobs)}"
    return next(iter(bucket.blobs.values()))


# ============================================================================
# API Client fixtures
# ============================================================================

@pytest.fixture
def mock_uploader() -> AsyncMock:
    """Uploader double for HTTP tests."""
    uploader = AsyncMock()
    uploader.upload.return_value = "https://storage.googleapis.com/test-bucket/abc123"
    return uploader


@pytest.fixture
def client(mock_uploader: AsyncMock) -> Generator[TestClient, None, None]:
    """Synchronous test client with the uploader dependency overridden."""
    from gcloud_storage.main import app
    from gcloud_storage.api.dependencies import get_uploader

    app.dependency_overrides[get_uploader] = lambda: mock_uploader

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
