"""Object store introspection models."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from filedrop.storage.base import BucketListing, ObjectListing


class BucketInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    creation_date: Optional[datetime] = Field(None, alias="creationDate")


class ObjectInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str
    size: int
    last_modified: Optional[datetime] = Field(None, alias="lastModified")
    etag: Optional[str] = None


class BucketListResponse(BaseModel):
    """Response model for ``action=list-buckets``."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    buckets: list[BucketInfo]
    owner: Optional[dict[str, Any]] = None
    custom_domain: Optional[str] = Field(None, alias="customDomain")
    custom_domain_configured: bool = Field(False, alias="customDomainConfigured")

    @classmethod
    def from_listing(cls, listing: BucketListing, custom_domain: Optional[str]) -> "BucketListResponse":
        return cls(
            buckets=[BucketInfo(name=b.name, creation_date=b.creation_date) for b in listing.buckets],
            owner=listing.owner,
            custom_domain=custom_domain,
            custom_domain_configured=bool(custom_domain),
        )


class ObjectListResponse(BaseModel):
    """Response model for ``action=list-objects``."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    bucket: str
    objects: list[ObjectInfo]
    key_count: int = Field(0, alias="keyCount")
    is_truncated: bool = Field(False, alias="isTruncated")

    @classmethod
    def from_listing(cls, listing: ObjectListing) -> "ObjectListResponse":
        return cls(
            bucket=listing.bucket,
            objects=[
                ObjectInfo(key=o.key, size=o.size, last_modified=o.last_modified, etag=o.etag)
                for o in listing.objects
            ],
            key_count=listing.key_count,
            is_truncated=listing.is_truncated,
        )
