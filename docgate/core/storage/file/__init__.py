"""Owner-scoped file storage for uploaded documents."""

from __future__ import annotations

from .errors import (
    FileStorageError,
    InvalidPathError,
    InvalidTypeError,
    NotFoundError,
    RejectionReason,
    StorageIOError,
    TooLargeError,
    UnauthenticatedError,
    UploadRejectedError,
)
from .paths import PathResolver
from .validator import UploadValidator, ValidationResult
from .backend import StorageBackend, StoredFile
from .local_backend import LocalStorageBackend
from .manager import FileManager

__all__ = [
    "FileStorageError",
    "InvalidPathError",
    "InvalidTypeError",
    "NotFoundError",
    "RejectionReason",
    "StorageIOError",
    "TooLargeError",
    "UnauthenticatedError",
    "UploadRejectedError",
    "PathResolver",
    "UploadValidator",
    "ValidationResult",
    "StorageBackend",
    "StoredFile",
    "LocalStorageBackend",
    "FileManager",
]
