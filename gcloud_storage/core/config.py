"""Application configuration using Pydantic Settings."""

import json
import re
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings
from typing import Any, Dict, Optional, Union

from gcloud_storage.storage.models import (
    PredefinedAcl,
    StorageConfiguration,
    WriteStreamOptions,
)


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Service Identity
    SERVICE_NAME: str = "gcloud-storage-uploader"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"  # development, staging, production

    # Logging Configuration
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_JSON: bool = True    # JSON logs (prod) vs pretty console (dev)
    DEBUG: bool = False      # Enable debug mode features

    # Google Cloud Storage credentials
    # Either a path to a service-account key file or the key itself as JSON.
    # When both are empty, application default credentials are used.
    GCS_KEY_FILENAME: Optional[str] = None
    GCS_CREDENTIALS_JSON: Optional[Union[str, Dict[str, Any]]] = None
    GCS_PROJECT_ID: Optional[str] = None

    # Bucket and upload defaults
    GCS_DEFAULT_BUCKET_NAME: str = "gcloud-storage-dev"
    GCS_PREDEFINED_ACL: Optional[PredefinedAcl] = None  # None -> publicRead
    GCS_STORAGE_BASE_URI: Optional[str] = None  # e.g. a CDN in front of the bucket
    GCS_WRITE_STREAM_OPTIONS: Optional[WriteStreamOptions] = None
    GCS_UPLOAD_PREFIX: Optional[str] = None  # Prefix used by the HTTP upload route

    # Upload Constraints
    MAX_UPLOAD_SIZE_MB: int = 10

    @field_validator('GCS_DEFAULT_BUCKET_NAME')
    @classmethod
    def validate_bucket_name(cls, v: str) -> str:
        """Validate the bucket name follows GCS naming conventions.

        Rules:
        - 3-63 characters long
        - Lowercase letters, numbers, hyphens, underscores and dots only
        - Must start and end with a letter or number
        - No consecutive dots
        - Not formatted as an IP address
        """
        if not v:
            raise ValueError("GCS_DEFAULT_BUCKET_NAME must not be empty")

        if not 3 <= len(v) <= 63:
            raise ValueError(f"GCS bucket name must be 3-63 characters long, got {len(v)}")

        if not re.match(r'^[a-z0-9][a-z0-9._-]*[a-z0-9]$', v):
            raise ValueError(
                f"GCS bucket name '{v}' must start/end with letter or number, "
                "and contain only lowercase letters, numbers, hyphens, underscores and dots"
            )

        if '..' in v:
            raise ValueError("GCS bucket name cannot contain consecutive dots")

        if re.match(r'^\d+\.\d+\.\d+\.\d+$', v):
            raise ValueError("GCS bucket name cannot be formatted as an IP address")

        return v

    @field_validator('GCS_STORAGE_BASE_URI')
    @classmethod
    def validate_storage_base_uri(cls, v: Optional[str]) -> Optional[str]:
        """Validate storage base URI format if provided."""
        if v is None or v == "":
            return None

        if not re.match(r'^https?://.+', v):
            raise ValueError(
                f"GCS_STORAGE_BASE_URI must start with http:// or https://, got '{v}'"
            )

        return v

    @field_validator('GCS_CREDENTIALS_JSON')
    @classmethod
    def parse_credentials_json(
        cls, v: Optional[Union[str, Dict[str, Any]]]
    ) -> Optional[Dict[str, Any]]:
        """Accept the inline key as a JSON string or an already decoded mapping."""
        if v is None or v == "":
            return None
        if isinstance(v, dict):
            return v
        try:
            return json.loads(v)
        except json.JSONDecodeError as exc:
            raise ValueError(f"GCS_CREDENTIALS_JSON is not valid JSON: {exc.msg}") from exc

    @model_validator(mode='after')
    def validate_credentials(self):
        """Only one credential source may be configured."""
        if self.GCS_KEY_FILENAME and self.GCS_CREDENTIALS_JSON:
            raise ValueError(
                "Set either GCS_KEY_FILENAME or GCS_CREDENTIALS_JSON, not both"
            )
        return self

    @property
    def is_debug_mode(self) -> bool:
        """Check if application is in debug mode."""
        return self.DEBUG or self.LOG_LEVEL.upper() == "DEBUG"

    @property
    def use_json_logs(self) -> bool:
        """Determine if JSON logging should be used.

        In production, always use JSON logs.
        In development, allow override via LOG_JSON setting.
        """
        if self.ENVIRONMENT == "production":
            return True
        if self.DEBUG:
            return self.LOG_JSON
        return True

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    def storage_configuration(self) -> StorageConfiguration:
        """Build the immutable storage configuration handed to the uploader."""
        return StorageConfiguration(
            key_filename=self.GCS_KEY_FILENAME,
            credentials_info=self.GCS_CREDENTIALS_JSON,
            project_id=self.GCS_PROJECT_ID,
            default_bucket_name=self.GCS_DEFAULT_BUCKET_NAME,
            predefined_acl=self.GCS_PREDEFINED_ACL,
            storage_base_uri=self.GCS_STORAGE_BASE_URI,
            write_stream_options=self.GCS_WRITE_STREAM_OPTIONS,
        )

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
