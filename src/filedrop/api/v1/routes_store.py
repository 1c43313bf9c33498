"""Object store introspection routes."""

import asyncio
import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from filedrop.api.dependencies import get_object_store
from filedrop.core.config import REQUIRED_STORE_ENV_VARS
from filedrop.models.store import BucketListResponse, ObjectListResponse
from filedrop.services.uploader.exceptions import StoreError
from filedrop.storage.base import ObjectStore

router = APIRouter(tags=["store"])
logger = logging.getLogger(__name__)

MAX_LISTED_OBJECTS = 100


@router.get("/store")
async def inspect_store(
    action: str = Query("list-objects", description='"list-buckets" or "list-objects"'),
    store: ObjectStore = Depends(get_object_store),
):
    """List buckets or objects of the configured store."""
    if not store.is_configured():
        return JSONResponse(
            status_code=400,
            content={
                "error": "Object store is not configured. Please set up your environment variables.",
                "configured": False,
                "requiredEnvVars": REQUIRED_STORE_ENV_VARS,
            },
        )

    try:
        if action == "list-buckets":
            listing = await asyncio.to_thread(store.list_buckets)
            body = BucketListResponse.from_listing(listing, store.config.custom_domain)
        elif action == "list-objects":
            listing = await asyncio.to_thread(store.list_objects, MAX_LISTED_OBJECTS)
            body = ObjectListResponse.from_listing(listing)
        else:
            return JSONResponse(
                status_code=400,
                content={"error": 'Invalid action. Use "list-buckets" or "list-objects"'},
            )
    except StoreError as e:
        logger.error("Object store introspection failed", extra={"action": action, "error": str(e)})
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to connect to object store",
                "details": str(e),
                "configured": store.is_configured(),
            },
        )

    return JSONResponse(content=body.model_dump(mode="json", by_alias=True))
