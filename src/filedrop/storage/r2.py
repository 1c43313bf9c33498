"""Cloudflare R2 (S3-compatible) object store backend."""

import logging
import threading
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from filedrop.services.uploader.exceptions import StoreError
from filedrop.storage.base import (
    BucketListing,
    BucketSummary,
    ObjectListing,
    ObjectStore,
    ObjectSummary,
    StoreConfig,
    StoreReceipt,
)

logger = logging.getLogger(__name__)

# Invalid endpoint URLs surface as ValueError from client construction
_STORE_ERRORS = (ClientError, BotoCoreError, ValueError)


def _error_code(error: Exception) -> str:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code", "Unknown")
    return type(error).__name__


class R2ObjectStore(ObjectStore):
    """Object store backed by an S3-compatible API through boto3."""

    def __init__(self, config: StoreConfig):
        super().__init__(config)
        self._client: Optional[Any] = None
        self._client_lock = threading.Lock()

    def _get_client(self) -> Any:
        """Lazy-load and cache the S3 client.

        Creation is serialized because puts call this from worker threads and
        the default boto3 session is not thread-safe.
        """
        if self._client is not None:
            return self._client

        with self._client_lock:
            if self._client is None:
                if not self.is_configured():
                    raise StoreError("Object store is not configured")

                self._client = boto3.client(
                    "s3",
                    endpoint_url=self.config.resolved_endpoint,
                    aws_access_key_id=self.config.access_key_id,
                    aws_secret_access_key=self.config.secret_access_key,
                    config=Config(
                        region_name="auto",
                        signature_version="s3v4",
                    ),
                )

        return self._client

    def is_configured(self) -> bool:
        return self.config.is_complete

    def put_object(self, key: str, data: bytes, content_type: str) -> StoreReceipt:
        try:
            response = self._get_client().put_object(
                Bucket=self.config.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
                ContentLength=len(data),
            )
        except _STORE_ERRORS as e:
            logger.error(
                "Failed to put object",
                extra={
                    "bucket": self.config.bucket_name,
                    "key": key,
                    "error_code": _error_code(e),
                },
            )
            raise StoreError(f"Failed to store object: {_error_code(e)}") from e

        logger.debug(
            "Object stored",
            extra={"bucket": self.config.bucket_name, "key": key, "size_bytes": len(data)},
        )
        return StoreReceipt(
            etag=response.get("ETag"),
            version_id=response.get("VersionId"),
        )

    def list_objects(self, max_keys: int = 100) -> ObjectListing:
        try:
            response = self._get_client().list_objects_v2(
                Bucket=self.config.bucket_name,
                MaxKeys=max_keys,
            )
        except _STORE_ERRORS as e:
            logger.error(
                "Failed to list objects",
                extra={"bucket": self.config.bucket_name, "error_code": _error_code(e)},
            )
            raise StoreError(f"Failed to list objects: {_error_code(e)}") from e

        objects = [
            ObjectSummary(
                key=item["Key"],
                size=item.get("Size", 0),
                last_modified=item.get("LastModified"),
                etag=item.get("ETag"),
            )
            for item in response.get("Contents", [])
        ]
        return ObjectListing(
            bucket=self.config.bucket_name,
            objects=objects,
            key_count=response.get("KeyCount", len(objects)),
            is_truncated=response.get("IsTruncated", False),
        )

    def list_buckets(self) -> BucketListing:
        try:
            response = self._get_client().list_buckets()
        except _STORE_ERRORS as e:
            logger.error("Failed to list buckets", extra={"error_code": _error_code(e)})
            raise StoreError(f"Failed to list buckets: {_error_code(e)}") from e

        buckets = [
            BucketSummary(name=item["Name"], creation_date=item.get("CreationDate"))
            for item in response.get("Buckets", [])
        ]
        return BucketListing(buckets=buckets, owner=response.get("Owner"))

    def get_backend_name(self) -> str:
        return "r2"
