"""Size and MIME-type policy for uploaded files."""

from dataclasses import dataclass

from filedrop.models.upload import UploadItem
from filedrop.services.uploader.exceptions import FileTooLargeError, UnsupportedFileTypeError

DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024

DEFAULT_ALLOWED_MIME_TYPES = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/pdf",
    "text/plain",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)


def format_size_limit(size_bytes: int) -> str:
    """Render a byte limit the way it is configured, e.g. ``5MB``."""
    mib = 1024 * 1024
    if size_bytes % mib == 0:
        return f"{size_bytes // mib}MB"
    if size_bytes % 1024 == 0:
        return f"{size_bytes // 1024}KB"
    return f"{size_bytes} bytes"


@dataclass(frozen=True)
class UploadPolicy:
    """Per-file acceptance rules.

    Checks run in a fixed order and the first failure wins:

    1. size, against ``max_file_size_bytes``
    2. declared MIME type, against ``allowed_mime_types``

    A file that is both too large and of a disallowed type is therefore
    reported as too large.
    """

    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE
    allowed_mime_types: frozenset[str] = frozenset(DEFAULT_ALLOWED_MIME_TYPES)

    def check(self, item: UploadItem) -> None:
        """Validate one file against the policy.

        Args:
            item: File to validate

        Raises:
            FileTooLargeError: If the file exceeds the size limit
            UnsupportedFileTypeError: If the MIME type is not allowed
        """
        if item.size > self.max_file_size_bytes:
            raise FileTooLargeError(
                f"File '{item.filename}' size exceeds "
                f"{format_size_limit(self.max_file_size_bytes)} limit"
            )

        if item.content_type not in self.allowed_mime_types:
            raise UnsupportedFileTypeError(f"File '{item.filename}' type not allowed")
