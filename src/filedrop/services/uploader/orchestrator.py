"""Orchestrator for batch file uploads."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Sequence

from filedrop.models.upload import (
    Accepted,
    Rejected,
    UploadBatchResult,
    UploadItem,
    UploadOutcome,
)
from filedrop.services.uploader.exceptions import StoreError, TranscodeError, ValidationError
from filedrop.services.uploader.naming import build_storage_key
from filedrop.services.uploader.policy import UploadPolicy
from filedrop.services.uploader.transcoder import (
    DEFAULT_IMAGE_QUALITY,
    ImageTranscoder,
    is_compressible,
)
from filedrop.storage.base import ObjectStore

logger = logging.getLogger(__name__)


class UnconfiguredStoreMode(str, Enum):
    """What to do with valid files when the object store is not configured."""

    METADATA_ONLY = "metadata_only"  # Accept and report, store nothing
    REJECT = "reject"  # Reject every file


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_unix_millis(value: datetime) -> int:
    return (value - EPOCH) // timedelta(milliseconds=1)


class UploadOrchestrator:
    """Runs each file of a batch through validate, compress, store.

    Files are processed concurrently and independently; one file's failure
    never affects another. Outcomes come back in input order.
    """

    def __init__(
        self,
        policy: UploadPolicy,
        store: ObjectStore,
        transcoder: ImageTranscoder | None = None,
        image_quality: int = DEFAULT_IMAGE_QUALITY,
        unconfigured_mode: UnconfiguredStoreMode = UnconfiguredStoreMode.METADATA_ONLY,
        max_concurrency: int = 4,
        clock: Callable[[], datetime] = utc_now,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.policy = policy
        self.store = store
        self.transcoder = transcoder
        self.image_quality = image_quality
        self.unconfigured_mode = UnconfiguredStoreMode(unconfigured_mode)
        self.max_concurrency = max_concurrency
        self.clock = clock

    async def process_batch(
        self, items: Sequence[UploadItem], compress: bool = False
    ) -> UploadBatchResult:
        """Process every file of a batch.

        Args:
            items: Files in request order
            compress: Re-encode compressible images before storing

        Returns:
            One outcome per file, in the same order as ``items``
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run(item: UploadItem) -> UploadOutcome:
            async with semaphore:
                return await self.process_item(item, compress)

        outcomes = await asyncio.gather(*(run(item) for item in items))

        result = UploadBatchResult(outcomes=tuple(outcomes))
        logger.info(
            "Upload batch processed",
            extra={
                "file_count": len(items),
                "accepted_count": len(result.accepted),
                "rejected_count": len(result.rejected),
                "compress": compress,
            },
        )
        return result

    async def process_item(self, item: UploadItem, compress: bool = False) -> UploadOutcome:
        """Run one file through the pipeline; every failing step is terminal."""
        try:
            self.policy.check(item)
        except ValidationError as e:
            return self._reject(item, str(e), stage="validation")

        data = item.data
        if compress and self.transcoder is not None and is_compressible(item.content_type):
            try:
                data = await asyncio.to_thread(
                    self.transcoder.transcode, data, item.content_type, self.image_quality
                )
            except TranscodeError:
                return self._reject(
                    item, f"File '{item.filename}' compression failed", stage="compression"
                )

        uploaded_at = self.clock()
        storage_key = build_storage_key(item.filename, to_unix_millis(uploaded_at))

        if not self.store.is_configured():
            if self.unconfigured_mode is UnconfiguredStoreMode.REJECT:
                return self._reject(item, "Object store is not configured", stage="storage")
            logger.info(
                "Upload accepted without storage",
                extra={"original_name": item.filename, "storage_key": storage_key, "size_bytes": len(data)},
            )
            return Accepted(
                original_name=item.filename,
                storage_key=storage_key,
                final_size=len(data),
                final_mime_type=item.content_type,
                uploaded_at=uploaded_at,
            )

        try:
            receipt = await asyncio.to_thread(
                self.store.put_object, storage_key, data, item.content_type
            )
        except StoreError:
            return self._reject(
                item, f"Failed to upload '{item.filename}' to object store", stage="storage"
            )

        logger.info(
            "Upload accepted",
            extra={
                "original_name": item.filename,
                "storage_key": storage_key,
                "size_bytes": len(data),
                "original_size_bytes": item.size,
                "backend": self.store.get_backend_name(),
            },
        )
        return Accepted(
            original_name=item.filename,
            storage_key=storage_key,
            final_size=len(data),
            final_mime_type=item.content_type,
            uploaded_at=uploaded_at,
            public_url=self.store.generate_public_url(storage_key),
            receipt=receipt,
        )

    @staticmethod
    def _reject(item: UploadItem, reason: str, stage: str) -> Rejected:
        logger.info(
            "Upload rejected",
            extra={"original_name": item.filename, "stage": stage, "reason": reason},
        )
        return Rejected(original_name=item.filename, reason=reason)
