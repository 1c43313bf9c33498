"""Custom exceptions for the upload pipeline."""


class UploadException(Exception):
    """Base exception for the upload pipeline."""
    pass


class ValidationError(UploadException):
    """Exception raised when a file fails the upload policy."""
    pass


class FileTooLargeError(ValidationError):
    """Exception raised when file exceeds size limit."""
    pass


class UnsupportedFileTypeError(ValidationError):
    """Exception raised when the declared MIME type is not allowed."""
    pass


class TranscodeError(UploadException):
    """Exception raised when image re-encoding fails."""
    pass


class StoreError(UploadException):
    """Exception raised when object store operations fail."""
    pass


class RequestError(UploadException):
    """Exception raised when the request itself cannot be processed."""
    pass
