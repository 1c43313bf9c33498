"""
Upload pipeline

Validates uploaded files against the size and MIME-type policy, optionally
re-encodes images, and submits accepted files to the object store.
"""

from filedrop.services.uploader.exceptions import (
    FileTooLargeError,
    RequestError,
    StoreError,
    TranscodeError,
    UnsupportedFileTypeError,
    UploadException,
    ValidationError,
)
from filedrop.services.uploader.naming import build_storage_key, sanitize_filename
from filedrop.services.uploader.orchestrator import UnconfiguredStoreMode, UploadOrchestrator
from filedrop.services.uploader.policy import UploadPolicy
from filedrop.services.uploader.transcoder import ImageTranscoder, PillowTranscoder

__all__ = [
    "UploadException",
    "ValidationError",
    "FileTooLargeError",
    "UnsupportedFileTypeError",
    "TranscodeError",
    "StoreError",
    "RequestError",
    "build_storage_key",
    "sanitize_filename",
    "UploadPolicy",
    "ImageTranscoder",
    "PillowTranscoder",
    "UploadOrchestrator",
    "UnconfiguredStoreMode",
]
