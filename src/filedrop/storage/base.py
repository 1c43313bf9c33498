"""Abstract object store interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class StoreConfig:
    """Object store identity, credentials and public domain.

    Built once at startup and never mutated. A store is configured when the
    account (or an explicit endpoint), both credentials and the bucket are set.
    """

    account_id: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = field(default=None, repr=False)
    bucket_name: Optional[str] = None
    custom_domain: Optional[str] = None
    endpoint_url: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(
            (self.account_id or self.endpoint_url)
            and self.access_key_id
            and self.secret_access_key
            and self.bucket_name
        )

    @property
    def resolved_endpoint(self) -> Optional[str]:
        """Endpoint URL, defaulting to the account's R2 endpoint."""
        if self.endpoint_url:
            return self.endpoint_url
        if self.account_id:
            return f"https://{self.account_id}.r2.cloudflarestorage.com"
        return None


@dataclass(frozen=True)
class StoreReceipt:
    """Acknowledgement returned by the store for one put."""

    etag: Optional[str] = None
    version_id: Optional[str] = None


@dataclass(frozen=True)
class ObjectSummary:
    key: str
    size: int
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None


@dataclass(frozen=True)
class ObjectListing:
    bucket: str
    objects: list[ObjectSummary]
    key_count: int
    is_truncated: bool = False


@dataclass(frozen=True)
class BucketSummary:
    name: str
    creation_date: Optional[datetime] = None


@dataclass(frozen=True)
class BucketListing:
    buckets: list[BucketSummary]
    owner: Optional[dict] = None


class ObjectStore(ABC):
    """Abstract base class for object store clients."""

    def __init__(self, config: StoreConfig):
        self.config = config

    @abstractmethod
    def is_configured(self) -> bool:
        """Return True when the store can be reached with the given config."""
        pass

    @abstractmethod
    def put_object(self, key: str, data: bytes, content_type: str) -> StoreReceipt:
        """Create or overwrite one object in the configured bucket.

        Args:
            key: Object key
            data: Object content
            content_type: MIME type stored with the object

        Returns:
            Receipt with the store's ETag and version id

        Raises:
            StoreError: If the store rejects the write or is unreachable
        """
        pass

    @abstractmethod
    def list_objects(self, max_keys: int = 100) -> ObjectListing:
        """List objects in the configured bucket.

        Raises:
            StoreError: If the listing fails
        """
        pass

    @abstractmethod
    def list_buckets(self) -> BucketListing:
        """List buckets visible to the configured credentials.

        Raises:
            StoreError: If the listing fails
        """
        pass

    @abstractmethod
    def get_backend_name(self) -> str:
        """Return backend identifier."""
        pass

    def generate_public_url(self, key: str) -> Optional[str]:
        """Build the public URL of ``key`` under the custom domain.

        Returns None when no custom domain is configured. Does not check
        that the object exists.
        """
        domain = self.config.custom_domain
        if not domain:
            return None
        if not domain.startswith("http"):
            domain = f"https://{domain}"
        return f"{domain.rstrip('/')}/{key}"
