"""Upload data models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from filedrop.storage.base import StoreReceipt


@dataclass(frozen=True)
class UploadItem:
    """One file received in an upload request."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class Accepted:
    """Outcome of a file that passed the pipeline."""

    original_name: str
    storage_key: str
    final_size: int
    final_mime_type: str
    uploaded_at: datetime
    public_url: Optional[str] = None
    receipt: Optional[StoreReceipt] = None


@dataclass(frozen=True)
class Rejected:
    """Outcome of a file that failed one pipeline step."""

    original_name: str
    reason: str


UploadOutcome = Union[Accepted, Rejected]


@dataclass(frozen=True)
class UploadBatchResult:
    """Outcomes of one batch, in input order."""

    outcomes: tuple[UploadOutcome, ...]

    @property
    def accepted(self) -> list[Accepted]:
        return [o for o in self.outcomes if isinstance(o, Accepted)]

    @property
    def rejected(self) -> list[Rejected]:
        return [o for o in self.outcomes if isinstance(o, Rejected)]


class UploadMetadata(BaseModel):
    """Store acknowledgement for a stored file."""

    model_config = ConfigDict(populate_by_name=True)

    etag: Optional[str] = None
    version_id: Optional[str] = Field(None, alias="versionId")


class FileInfo(BaseModel):
    """Public description of an accepted file."""

    model_config = ConfigDict(populate_by_name=True)

    original_name: str = Field(..., alias="originalName")
    filename: str
    size: int
    type: str
    uploaded_at: str = Field(..., alias="uploadedAt")
    url: Optional[str] = None
    upload_metadata: Optional[UploadMetadata] = Field(None, alias="uploadMetadata")


class AcceptedResult(BaseModel):
    success: Literal[True] = True
    file_info: FileInfo = Field(..., alias="fileInfo")

    model_config = ConfigDict(populate_by_name=True)


class RejectedResult(BaseModel):
    error: str


class UploadResponse(BaseModel):
    """Response model for a batch upload."""

    results: list[Union[AcceptedResult, RejectedResult]]


class ErrorResponse(BaseModel):
    error: str


def format_timestamp(value: datetime) -> str:
    """Render a UTC datetime as ISO-8601 with milliseconds and a Z suffix."""
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def outcome_to_result(outcome: UploadOutcome) -> Union[AcceptedResult, RejectedResult]:
    """Convert a pipeline outcome into its wire representation."""
    if isinstance(outcome, Rejected):
        return RejectedResult(error=outcome.reason)

    metadata = None
    if outcome.receipt is not None:
        metadata = UploadMetadata(etag=outcome.receipt.etag, version_id=outcome.receipt.version_id)

    return AcceptedResult(
        file_info=FileInfo(
            original_name=outcome.original_name,
            filename=outcome.storage_key,
            size=outcome.final_size,
            type=outcome.final_mime_type,
            uploaded_at=format_timestamp(outcome.uploaded_at),
            url=outcome.public_url,
            upload_metadata=metadata,
        )
    )
