"""Health API endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter

from gcloud_storage.core.config import settings


router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/")
async def health_check():
    """Basic health check for load balancers.

    Does not contact the bucket; storage failures surface on upload.
    """
    return {
        "status": "healthy",
        "service": settings.SERVICE_NAME,
        "version": settings.VERSION,
        "bucket": settings.GCS_DEFAULT_BUCKET_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
