"""Data models for uploads and uploader configuration."""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator


# Predefined ACL names accepted by the GCS JSON API.
PredefinedAcl = Literal[
    "private",
    "projectPrivate",
    "publicRead",
    "publicReadWrite",
    "authenticatedRead",
    "bucketOwnerRead",
    "bucketOwnerFullControl",
]

DEFAULT_PREDEFINED_ACL: PredefinedAcl = "publicRead"


class UploadedFileMetadata(BaseModel):
    """An in-memory file as received from a multipart form upload.

    Consumed once per upload call and never persisted. ``storage_url`` is
    empty until the file has been stored.
    """
    fieldname: str = "file"
    originalname: str = ""
    encoding: str = "7bit"
    mimetype: Optional[str] = None
    buffer: bytes
    size: Optional[int] = None
    storage_url: Optional[str] = None

    @field_validator('buffer')
    @classmethod
    def validate_buffer(cls, v: bytes) -> bytes:
        if not v:
            raise ValueError("File buffer must not be empty")
        return v


class WriteStreamOptions(BaseModel):
    """Options applied to the object write.

    Blob properties (cache control, content headers, custom metadata) are set
    on the object before the write; the remaining fields are passed to the
    upload call itself. A ``predefined_acl`` given here wins over the
    resolved access-control setting.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    metadata: Optional[Dict[str, str]] = None
    cache_control: Optional[str] = None
    content_disposition: Optional[str] = None
    content_encoding: Optional[str] = None
    content_language: Optional[str] = None
    predefined_acl: Optional[PredefinedAcl] = None
    checksum: Optional[Literal["md5", "crc32c"]] = None
    timeout: Optional[float] = None
    if_generation_match: Optional[int] = None


class StorageConfiguration(BaseModel):
    """Process-wide uploader configuration.

    Built once at startup and shared read-only by every upload.
    """
    model_config = ConfigDict(frozen=True)

    key_filename: Optional[str] = None
    credentials_info: Optional[Dict[str, Any]] = None
    project_id: Optional[str] = None
    default_bucket_name: str
    predefined_acl: Optional[PredefinedAcl] = None
    storage_base_uri: Optional[str] = None
    write_stream_options: Optional[WriteStreamOptions] = None


class PerRequestOptions(BaseModel):
    """Per-upload overrides. Fields left as None fall back to the configuration."""
    model_config = ConfigDict(frozen=True)

    prefix: Optional[str] = None
    predefined_acl: Optional[PredefinedAcl] = None
    storage_base_uri: Optional[str] = None
    write_stream_options: Optional[WriteStreamOptions] = None
    default_bucket_name: Optional[str] = None
