"""Upload validation against MIME type and extension allow-lists."""

from __future__ import annotations

import os
from typing import Any

from .errors import RejectionReason


class ValidationResult:
    """
    Outcome of validating an upload: accepted, or rejected with a reason.

    Accepted results carry the normalised MIME type and extension so the
    caller records exactly what was checked.
    """

    def __init__(
        self,
        accepted: bool,
        reason: RejectionReason | None = None,
        message: str | None = None,
        mime_type: str | None = None,
        extension: str | None = None,
    ):
        self.accepted = accepted
        self.reason = reason
        self.message = message
        self.mime_type = mime_type
        self.extension = extension

    @classmethod
    def accept(cls, mime_type: str, extension: str) -> ValidationResult:
        return cls(True, mime_type=mime_type, extension=extension)

    @classmethod
    def reject(cls, reason: RejectionReason, message: str) -> ValidationResult:
        return cls(False, reason=reason, message=message)

    def __bool__(self) -> bool:
        return self.accepted

    def __repr__(self) -> str:
        if self.accepted:
            return f"ValidationResult(accepted, {self.mime_type}, {self.extension})"
        return f"ValidationResult(rejected, {self.reason.value})"


def extension_of(filename: str) -> str:
    """
    Lowercased extension of ``filename`` including the dot.

    Follows ``os.path.splitext``: ``".pdf"`` and ``"README"`` have no extension.
    """
    return os.path.splitext(filename or "")[1].lower()


def normalize_mime_type(mime_type: str | None) -> str:
    """Lowercase and drop parameters (``text/plain; charset=utf-8`` -> ``text/plain``)."""
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().lower()


class UploadValidator:
    """
    Accepts an upload only when the declared MIME type and the filename
    extension are both allow-listed and the size is within the ceiling.

    The two type checks are independent: a PDF MIME type with a ``.exe``
    name fails, and so does ``image/png`` sent as ``photo.png`` with an
    ``application/octet-stream`` content type.
    """

    def __init__(self, config: Any):
        """
        Args:
            config: UploadSettings (allowed_mime_types, allowed_extensions,
                max_size_bytes)
        """
        self.allowed_mime_types = frozenset(
            normalize_mime_type(m) for m in config.allowed_mime_types)
        self.allowed_extensions = frozenset(
            e.lower() for e in config.allowed_extensions)
        self.max_size_bytes = config.max_size_bytes

    def validate(
        self,
        declared_mime_type: str | None,
        filename: str,
        size_bytes: int,
    ) -> ValidationResult:
        """
        Validate an upload before any bytes are written.

        Args:
            declared_mime_type: Content type sent by the client
            filename: Original filename (only its extension is used)
            size_bytes: Upload size

        Returns:
            ValidationResult; rejected results carry ``invalid-type`` or
            ``too-large``
        """
        mime_type = normalize_mime_type(declared_mime_type)
        extension = extension_of(filename)

        if not self.is_type_allowed(mime_type, extension):
            allowed = ", ".join(sorted(
                e.lstrip(".").upper() for e in self.allowed_extensions))
            return ValidationResult.reject(
                RejectionReason.INVALID_TYPE,
                f"Invalid file type. Allowed: {allowed}")

        if size_bytes > self.max_size_bytes:
            size_mb = size_bytes / (1024 * 1024)
            max_mb = self.max_size_bytes / (1024 * 1024)
            return ValidationResult.reject(
                RejectionReason.TOO_LARGE,
                f"File too large ({size_mb:.2f} MB, max {max_mb:.2f} MB)")

        return ValidationResult.accept(mime_type, extension)

    def is_type_allowed(self, mime_type: str, extension: str) -> bool:
        return (mime_type in self.allowed_mime_types
                and extension in self.allowed_extensions)
