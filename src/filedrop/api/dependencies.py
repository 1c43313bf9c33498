"""FastAPI dependency providers."""

from fastapi import Depends, Request

from filedrop.core.config import Settings, settings as app_settings
from filedrop.services.uploader.orchestrator import UnconfiguredStoreMode, UploadOrchestrator
from filedrop.services.uploader.transcoder import PillowTranscoder
from filedrop.storage.base import ObjectStore
from filedrop.storage.factory import get_object_store as build_object_store


def get_settings() -> Settings:
    return app_settings


def get_object_store(request: Request, settings: Settings = Depends(get_settings)) -> ObjectStore:
    """Return the store created at startup, creating it on first use."""
    store = getattr(request.app.state, "object_store", None)
    if store is None:
        store = build_object_store(settings)
        request.app.state.object_store = store
    return store


def get_orchestrator(
    settings: Settings = Depends(get_settings),
    store: ObjectStore = Depends(get_object_store),
) -> UploadOrchestrator:
    return UploadOrchestrator(
        policy=settings.upload_policy(),
        store=store,
        transcoder=PillowTranscoder(),
        image_quality=settings.IMAGE_QUALITY,
        unconfigured_mode=UnconfiguredStoreMode(settings.UNCONFIGURED_STORE_MODE),
        max_concurrency=settings.UPLOAD_CONCURRENCY,
    )
