"""FastAPI application exposing the Google Cloud Storage uploader."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from gcloud_storage.api.exception_handlers import (
    configuration_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from gcloud_storage.api.middleware import RequestLoggingMiddleware
from gcloud_storage.api.v1 import health, upload
from gcloud_storage.core.config import settings
from gcloud_storage.core.errors import StorageConfigurationError
from gcloud_storage.core.logging_config import get_logger, setup_logging
from gcloud_storage.storage import get_storage_service


# Initialize logging system (MUST be done before any logging calls)
setup_logging(debug=settings.is_debug_mode, json_logs=settings.use_json_logs)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the uploader once at startup; it lives as long as the process."""
    logger.info(
        "application_startup",
        service=settings.SERVICE_NAME,
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        debug_mode=settings.is_debug_mode,
        log_level=settings.LOG_LEVEL,
        bucket_name=settings.GCS_DEFAULT_BUCKET_NAME,
    )

    get_storage_service()

    yield

    logger.info("application_shutdown", graceful=True)


app = FastAPI(
    title=settings.SERVICE_NAME,
    description="Uploads files to Google Cloud Storage and returns their public URLs",
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StorageConfigurationError, configuration_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(upload.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint with service information."""
    return {
        "service": settings.SERVICE_NAME,
        "version": settings.VERSION,
        "documentation": "/docs",
        "health_check": "/api/v1/health/",
        "upload": "/api/v1/files/upload",
    }
