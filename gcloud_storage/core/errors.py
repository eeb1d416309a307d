"""
Error codes and exceptions for the uploader.

Store failures raised by the Google client libraries are never wrapped by the
storage layer; only the HTTP layer turns them into a ``ServiceError``.
"""
from enum import Enum
from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    """Standardized error codes."""

    # Upload errors (UPLOAD_xxx)
    UPLOAD_EMPTY_FILE = "UPLOAD_001"
    UPLOAD_FILE_TOO_LARGE = "UPLOAD_002"

    # Storage errors (STORAGE_xxx)
    STORAGE_WRITE_FAILED = "STORAGE_001"

    # Configuration errors (CONFIG_xxx)
    CONFIG_BUCKET_MISSING = "CONFIG_001"


class StorageConfigurationError(Exception):
    """Raised when the uploader configuration cannot produce a result.

    For example, resolving a storage URL when no bucket name is available.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.CONFIG_BUCKET_MISSING):
        super().__init__(message)
        self.code = code


class ServiceError(HTTPException):
    """
    Error returned to HTTP clients with a standardized body:

    {
        "code": "UPLOAD_002",
        "message": "File size exceeds maximum allowed",
        "details": {"max_size_mb": 10}
    }
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status_code,
            detail={
                "code": code,
                "message": message,
                "details": details or {}
            }
        )
        self.code = code
        self.user_message = message
        self.error_details = details or {}


def upload_error(code: ErrorCode, message: str, details: Optional[Dict[str, Any]] = None) -> ServiceError:
    """Create an upload-related error (400 Bad Request)."""
    return ServiceError(status.HTTP_400_BAD_REQUEST, code, message, details)


def too_large_error(code: ErrorCode, message: str, details: Optional[Dict[str, Any]] = None) -> ServiceError:
    """Create a payload-too-large error (413)."""
    return ServiceError(413, code, message, details)


def storage_error(code: ErrorCode, message: str, details: Optional[Dict[str, Any]] = None) -> ServiceError:
    """Create a storage-related error (502 Bad Gateway)."""
    return ServiceError(status.HTTP_502_BAD_GATEWAY, code, message, details)
