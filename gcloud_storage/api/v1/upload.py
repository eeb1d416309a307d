"""
Upload API endpoint.

The ``stored_file`` dependency reads and stores the multipart file; the
router only shapes the HTTP response.
"""

from fastapi import APIRouter, Depends, status

from gcloud_storage.api.dependencies import stored_file
from gcloud_storage.core.config import settings
from gcloud_storage.core.logging_config import get_logger
from gcloud_storage.storage import UploadedFileMetadata


logger = get_logger(__name__)
router = APIRouter(prefix="/api/v1/files", tags=["upload"])


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadedFileMetadata = Depends(stored_file(settings.GCS_UPLOAD_PREFIX)),
):
    """Store a file in the bucket and return its public URL.

    Form fields:
        file: The file to store
        prefix: Optional object key prefix (defaults to GCS_UPLOAD_PREFIX)

    Returns:
        dict: ``url``, ``originalname``, ``mimetype`` and ``size`` of the stored file

    Raises:
        HTTPException: 400 if the file is empty
        HTTPException: 413 if the file is too large
        HTTPException: 502 if the storage write fails
    """
    logger.info(
        "upload_stored",
        originalname=file.originalname,
        size_bytes=file.size,
        storage_url=file.storage_url,
    )

    return {
        "url": file.storage_url,
        "originalname": file.originalname,
        "mimetype": file.mimetype,
        "size": file.size,
    }
