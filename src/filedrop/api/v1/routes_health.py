"""Health check endpoint for filedrop."""

from fastapi import APIRouter, Depends

from filedrop.api.dependencies import get_object_store, get_settings
from filedrop.core.config import Settings
from filedrop.storage.base import ObjectStore

router = APIRouter()


@router.get("/health")
async def health_check(
    settings: Settings = Depends(get_settings),
    store: ObjectStore = Depends(get_object_store),
) -> dict:
    """Health check endpoint.

    Does not contact the object store; ``storeConfigured`` only reports
    whether its settings are complete.

    Returns:
        dict: Health status response with status, service, version and store fields
    """
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "storageBackend": store.get_backend_name(),
        "storeConfigured": store.is_configured(),
    }
