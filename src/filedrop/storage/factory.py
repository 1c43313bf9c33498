"""Storage backend selection."""

import logging

from filedrop.core.config import Settings
from filedrop.storage.base import ObjectStore
from filedrop.storage.memory import InMemoryObjectStore
from filedrop.storage.r2 import R2ObjectStore

logger = logging.getLogger(__name__)


def get_object_store(settings: Settings) -> ObjectStore:
    """Create the object store selected by STORAGE_BACKEND.

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = settings.STORAGE_BACKEND.lower()
    config = settings.store_config()

    if backend == "memory":
        return InMemoryObjectStore(config)

    if backend == "r2":
        store = R2ObjectStore(config)
        if not store.is_configured():
            logger.warning(
                "R2 environment variables are not configured. File uploads will return metadata only."
            )
        if not config.custom_domain:
            logger.warning("R2_CUSTOM_DOMAIN is not configured. File URLs will not be generated.")
        return store

    raise ValueError(f"Unknown storage backend: {settings.STORAGE_BACKEND}")
