"""In-memory object store backend for local development."""

import hashlib
from datetime import datetime, timezone
from typing import Dict

from filedrop.storage.base import (
    BucketListing,
    BucketSummary,
    ObjectListing,
    ObjectStore,
    ObjectSummary,
    StoreConfig,
    StoreReceipt,
)


class InMemoryObjectStore(ObjectStore):
    """Object store that keeps objects in a process-local dict."""

    def __init__(self, config: StoreConfig | None = None):
        super().__init__(config or StoreConfig())
        self.bucket_name = self.config.bucket_name or "local"
        self.created_at = datetime.now(timezone.utc)
        self._objects: Dict[str, tuple[bytes, str, datetime]] = {}

    def is_configured(self) -> bool:
        return True

    def put_object(self, key: str, data: bytes, content_type: str) -> StoreReceipt:
        self._objects[key] = (bytes(data), content_type, datetime.now(timezone.utc))
        return StoreReceipt(etag=f'"{hashlib.md5(data).hexdigest()}"')

    def get_object(self, key: str) -> tuple[bytes, str]:
        """Return the stored bytes and content type of ``key``."""
        data, content_type, _ = self._objects[key]
        return data, content_type

    def list_objects(self, max_keys: int = 100) -> ObjectListing:
        keys = sorted(self._objects)
        objects = [
            ObjectSummary(
                key=key,
                size=len(self._objects[key][0]),
                last_modified=self._objects[key][2],
                etag=f'"{hashlib.md5(self._objects[key][0]).hexdigest()}"',
            )
            for key in keys[:max_keys]
        ]
        return ObjectListing(
            bucket=self.bucket_name,
            objects=objects,
            key_count=len(objects),
            is_truncated=len(keys) > max_keys,
        )

    def list_buckets(self) -> BucketListing:
        return BucketListing(
            buckets=[BucketSummary(name=self.bucket_name, creation_date=self.created_at)]
        )

    def get_backend_name(self) -> str:
        return "memory"
