from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from docgate.config.settings import AppSettings, get_config_manager
from docgate.logging.setup import setup_logging, get_logger
from docgate.core.access import FeatureAccessPolicy
from docgate.core.storage.file import (
    FileManager,
    LocalStorageBackend,
    PathResolver,
    UploadValidator,
)
from docgate.core.api.router_file_uploads import router as file_uploads_router
from docgate.core.api.router_features import router as features_router


# Use basic logging before config is loaded
_basic_logger = logging.getLogger(__name__)

_config_manager = get_config_manager()
try:
    _config_manager.load()
    _basic_logger.info("Configuration loaded successfully")
except Exception as e:
    _basic_logger.error(f"Failed to load configuration: {e}")
    raise

setup_logging(_config_manager.logging_config)

logger = get_logger(__name__)


def build_file_manager(settings: AppSettings) -> FileManager:
    """Wire resolver, validator and local backend from settings."""
    resolver = PathResolver(settings.storage.root)
    backend = LocalStorageBackend(resolver, chunk_size=settings.storage.chunk_size)
    validator = UploadValidator(settings.uploads)
    return FileManager(backend, validator, settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.debug("Starting up the application")

    # Tests may reload configuration after import, so read it again here
    config_manager = get_config_manager()
    settings = config_manager.settings

    app.state.config_manager = config_manager
    app.state.file_manager = build_file_manager(settings)
    # Fails startup on an incomplete feature table
    app.state.feature_policy = FeatureAccessPolicy.from_settings(
        settings.features)

    logger.info(
        f"Application startup complete (storage root: {settings.storage.root})")

    yield

    logger.info("Application shutdown complete")


app = FastAPI(lifespan=lifespan)


@app.get("/")
def read_root():
    """Root endpoint for sanity check."""
    return {"message": "docgate file storage API"}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError):
    for error in exc.errors():
        logger.error(f"Validation error: {error}, request: {request.url.path}")
    return JSONResponse(
        status_code=422,
        content={
            "message": "Invalid input received. Please check your request and try again."}
    )


app.include_router(file_uploads_router)
app.include_router(features_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=_config_manager.api_host,
                port=_config_manager.api_port)
