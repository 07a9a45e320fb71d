"""Mapping of (owner id, storage key) to on-disk paths."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import InvalidPathError


_SEPARATORS = {"/", "\\", os.sep} | ({os.altsep} if os.altsep else set())


def check_segment(value: str, label: str) -> str:
    """
    Check that ``value`` can be used as exactly one path segment.

    Args:
        value: Owner id or storage key
        label: Name used in the error message

    Returns:
        The unchanged value

    Raises:
        InvalidPathError: If value is empty, contains a separator, a NUL
            byte, or is ``.`` or ``..``
    """
    if not isinstance(value, str) or not value:
        raise InvalidPathError(f"{label} must be a non-empty string")
    if any(sep in value for sep in _SEPARATORS):
        raise InvalidPathError(f"{label} must not contain path separators")
    if "\x00" in value:
        raise InvalidPathError(f"{label} must not contain NUL bytes")
    if value in (".", ".."):
        raise InvalidPathError(f"{label} must not be '.' or '..'")
    return value


class PathResolver:
    """
    Resolves storage paths below a fixed root.

    Layout: ``<root>/<owner_id>/<storage_key>``. Inputs that would escape the
    owner directory are rejected rather than cleaned up. No filesystem access.
    """

    def __init__(self, root: str | os.PathLike[str]):
        self.root = Path(root)

    def owner_directory(self, owner_id: str) -> Path:
        return self.root / check_segment(owner_id, "owner id")

    def resolve(self, owner_id: str, storage_key: str) -> Path:
        """
        Return the path of ``storage_key`` inside ``owner_id``'s directory.

        Raises:
            InvalidPathError: If either argument is not a safe path segment
        """
        return self.owner_directory(owner_id) / check_segment(
            storage_key, "storage key")
