"""FastAPI dependencies for storing uploaded files."""

from typing import Callable, Optional

from fastapi import Depends, File, Form, Header, UploadFile

from gcloud_storage.core.config import settings
from gcloud_storage.core.errors import (
    ErrorCode,
    storage_error,
    too_large_error,
    upload_error,
)
from gcloud_storage.core.logging_config import get_logger
from gcloud_storage.storage import (
    FileUploader,
    PerRequestOptions,
    UploadedFileMetadata,
    get_storage_service,
)


logger = get_logger(__name__)


def get_uploader() -> FileUploader:
    """Dependency returning the process-wide uploader."""
    return get_storage_service()


def _too_large(size_bytes: int):
    return too_large_error(
        ErrorCode.UPLOAD_FILE_TOO_LARGE,
        f"File too large. Maximum allowed: {settings.MAX_UPLOAD_SIZE_MB}MB",
        {"max_size_mb": settings.MAX_UPLOAD_SIZE_MB, "size_bytes": size_bytes},
    )


async def verify_content_length(
    content_length: Optional[int] = Header(None),
) -> Optional[int]:
    """Pre-validate upload size from the Content-Length header.

    Args:
        content_length: Content-Length header value

    Raises:
        ServiceError: 413 if the request exceeds MAX_UPLOAD_SIZE_MB

    Returns:
        int: Content length if valid
    """
    if content_length and content_length > settings.max_upload_size_bytes:
        raise _too_large(content_length)
    return content_length


async def to_file_metadata(upload: UploadFile, fieldname: str = "file") -> UploadedFileMetadata:
    """Read a multipart upload into memory.

    Args:
        upload: File from the multipart form
        fieldname: Form field the file came from

    Returns:
        UploadedFileMetadata: In-memory file ready to be stored

    Raises:
        ServiceError: 400 if the file is empty, 413 if it exceeds MAX_UPLOAD_SIZE_MB
    """
    max_size = settings.max_upload_size_bytes

    # Size is known from multipart parsing; reject before loading into memory
    if upload.size is not None and upload.size > max_size:
        raise _too_large(upload.size)

    data = await upload.read()

    if not data:
        raise upload_error(
            ErrorCode.UPLOAD_EMPTY_FILE,
            "Uploaded file is empty",
            {"filename": upload.filename},
        )

    if len(data) > max_size:
        raise _too_large(len(data))

    return UploadedFileMetadata(
        fieldname=fieldname,
        originalname=upload.filename or "",
        mimetype=upload.content_type,
        buffer=data,
        size=len(data),
    )


def stored_file(default_prefix: Optional[str] = None) -> Callable:
    """Build a dependency that stores the uploaded ``file`` field.

    The dependency resolves to the file's metadata with ``storage_url`` set.
    A ``prefix`` form field overrides ``default_prefix``.

    Example:
        >>> @router.post("/avatars")
        ... async def upload_avatar(file: UploadedFileMetadata = Depends(stored_file("avatars"))):
        ...     return {"url": file.storage_url}
    """
    async def dependency(
        content_length: Optional[int] = Depends(verify_content_length),
        file: UploadFile = File(...),
        prefix: Optional[str] = Form(None),
        uploader: FileUploader = Depends(get_uploader),
    ) -> UploadedFileMetadata:
        metadata = await to_file_metadata(file)
        object_prefix = prefix or default_prefix
        options = PerRequestOptions(prefix=object_prefix) if object_prefix else None

        try:
            url = await uploader.upload(metadata, options)
        except Exception as exc:
            logger.error(
                "stored_file_upload_failed",
                filename=metadata.originalname,
                prefix=object_prefix,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise storage_error(
                ErrorCode.STORAGE_WRITE_FAILED,
                "Failed to store uploaded file",
                {"error_type": type(exc).__name__},
            ) from exc

        return metadata.model_copy(update={"storage_url": url})

    return dependency
