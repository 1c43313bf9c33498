"""Main application entrypoint for filedrop."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from filedrop.api.v1 import routes_health
from filedrop.api.v1.routes_store import router as store_router
from filedrop.api.v1.routes_upload import router as upload_router
from filedrop.core.config import settings
from filedrop.core.logging import setup_logging
from filedrop.services.uploader.middleware import RequestLoggingMiddleware
from filedrop.storage.factory import get_object_store

logger = logging.getLogger(__name__)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    # Initialize logging first
    setup_logging()

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
    )

    app.state.object_store = get_object_store(settings)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(routes_health.router, tags=["health"])
    app.include_router(upload_router)
    app.include_router(store_router)

    return app


# Export app instance for ASGI servers
app = create_app()
