"""Exceptions raised by the file storage core."""

from __future__ import annotations

from enum import Enum


class RejectionReason(str, Enum):
    """Why an upload was refused before anything was written."""
    INVALID_TYPE = "invalid-type"
    TOO_LARGE = "too-large"


class FileStorageError(Exception):
    """Base class for file storage failures."""
    pass


class UnauthenticatedError(FileStorageError):
    """No caller identity was supplied."""
    pass


class InvalidPathError(FileStorageError, ValueError):
    """Owner id or storage key cannot be used as a single path segment."""
    pass


class UploadRejectedError(FileStorageError):
    """Upload failed validation; nothing was persisted."""

    reason: RejectionReason

    def __init__(self, message: str, reason: RejectionReason | None = None):
        super().__init__(message)
        if reason is not None:
            self.reason = reason


class InvalidTypeError(UploadRejectedError):
    reason = RejectionReason.INVALID_TYPE


class TooLargeError(UploadRejectedError):
    reason = RejectionReason.TOO_LARGE


class StorageIOError(FileStorageError, OSError):
    """Filesystem operation failed. Not retried."""
    pass


class NotFoundError(FileStorageError, FileNotFoundError):
    """Requested file does not exist for this owner."""
    pass


def rejection_error(reason: RejectionReason, message: str) -> UploadRejectedError:
    """Build the exception matching a validator rejection."""
    if reason is RejectionReason.TOO_LARGE:
        return TooLargeError(message)
    return InvalidTypeError(message)
