"""File manager for owner-scoped uploads, lookups and deletion."""

from __future__ import annotations

import io
import os
import uuid
from typing import BinaryIO, Any
from urllib.parse import quote

from docgate.logging.setup import get_logger
from .backend import StorageBackend, StoredFile
from .errors import (
    StorageIOError,
    TooLargeError,
    UnauthenticatedError,
    rejection_error,
)
from .paths import check_segment
from .validator import UploadValidator

logger = get_logger(__name__)


def measure_size(file_data: BinaryIO) -> int | None:
    """Size of a seekable stream, or None when it cannot be measured."""
    try:
        if not file_data.seekable():
            return None
        file_data.seek(0, os.SEEK_END)
        size = file_data.tell()
        file_data.seek(0)
        return size
    except (OSError, io.UnsupportedOperation):
        return None


class FileManager:
    """
    Owner-scoped file operations on top of a storage backend.

    Features:
    - Uploads validated before anything touches the disk
    - Fresh UUID storage key per upload; original names are display-only
    - Idempotent existence checks and deletes
    - Public URL construction without filesystem access

    Every operation takes the caller's ``owner_id`` explicitly; a missing
    identity raises :class:`UnauthenticatedError`.
    """

    def __init__(
        self,
        storage_backend: StorageBackend,
        validator: UploadValidator,
        config: Any = None,
    ):
        """
        Args:
            storage_backend: Storage backend
            validator: Upload validator
            config: AppSettings (uses storage.public_url_prefix)
        """
        self.storage = storage_backend
        self.validator = validator
        self.config = config

        storage_settings = getattr(config, "storage", None)
        self.url_prefix = getattr(
            storage_settings, "public_url_prefix", "/uploads").rstrip("/")

    async def upload(
        self,
        owner_id: str,
        file_data: BinaryIO,
        declared_mime_type: str | None,
        original_filename: str,
        size_bytes: int | None = None,
    ) -> StoredFile:
        """
        Validate and persist an upload.

        Args:
            owner_id: Verified caller id
            file_data: Binary stream with the file contents
            declared_mime_type: Content type declared by the client
            original_filename: Client filename, kept for display only
            size_bytes: Known size; measured from the stream when omitted

        Returns:
            StoredFile record for the new file

        Raises:
            UnauthenticatedError: If owner_id is empty
            InvalidTypeError: MIME type or extension not allowed
            TooLargeError: Size ceiling exceeded
            StorageIOError: Directory creation or write failed
        """
        self._require_owner(owner_id)
        check_segment(owner_id, "owner id")

        if size_bytes is None:
            size_bytes = measure_size(file_data)

        # Unmeasurable streams are bounded while copying
        result = self.validator.validate(
            declared_mime_type, original_filename, size_bytes or 0)
        if not result:
            logger.warning(
                f"Upload rejected for owner {owner_id}: {result.reason.value} "
                f"({original_filename!r}, {declared_mime_type!r}, {size_bytes} bytes)")
            raise rejection_error(result.reason, result.message)

        storage_key = f"{uuid.uuid4()}{result.extension}"

        try:
            written = await self.storage.save(
                owner_id, storage_key, file_data, self.validator.max_size_bytes)
        except TooLargeError:
            logger.warning(
                f"Upload rejected for owner {owner_id}: stream exceeded "
                f"{self.validator.max_size_bytes} bytes")
            raise
        except StorageIOError as e:
            logger.error(f"Failed to store file for owner {owner_id}: {e}")
            raise

        logger.info(
            f"Stored {storage_key} for owner {owner_id} ({written} bytes)")

        return StoredFile(
            owner_id=owner_id,
            storage_key=storage_key,
            original_name=original_filename,
            size_bytes=written,
            mime_type=result.mime_type,
            extension=result.extension,
        )

    async def store(
        self,
        owner_id: str,
        file_data: BinaryIO,
        declared_mime_type: str | None,
        original_filename: str,
    ) -> str:
        """Validate and persist an upload, returning its storage key."""
        stored = await self.upload(
            owner_id, file_data, declared_mime_type, original_filename)
        return stored.storage_key

    async def exists(self, owner_id: str, storage_key: str) -> bool:
        """True if the owner has a file under this key. Never raises for missing files."""
        self._require_owner(owner_id)
        return await self.storage.exists(owner_id, storage_key)

    async def delete(self, owner_id: str, storage_key: str) -> None:
        """
        Remove a file. Deleting a file that is already gone succeeds.

        Raises:
            StorageIOError: If the filesystem refuses the deletion
        """
        self._require_owner(owner_id)
        removed = await self.storage.delete(owner_id, storage_key)
        if removed:
            logger.info(f"Deleted {storage_key} for owner {owner_id}")
        else:
            logger.debug(
                f"Delete of {storage_key} for owner {owner_id}: already absent")

    async def read(self, owner_id: str, storage_key: str) -> bytes:
        """
        Return file contents.

        Raises:
            NotFoundError: If the owner has no such file
        """
        self._require_owner(owner_id)
        return await self.storage.retrieve(owner_id, storage_key)

    async def list_files(self, owner_id: str) -> list[StoredFile]:
        self._require_owner(owner_id)
        return await self.storage.list_files(owner_id)

    async def usage_bytes(self, owner_id: str) -> int:
        """Total bytes stored for an owner."""
        files = await self.list_files(owner_id)
        return sum(f.size_bytes for f in files)

    async def delete_owner(self, owner_id: str) -> None:
        """Remove all of an owner's files (account deletion)."""
        self._require_owner(owner_id)
        if await self.storage.delete_owner(owner_id):
            logger.info(f"Deleted all files for owner {owner_id}")

    def url_for(self, owner_id: str, storage_key: str) -> str:
        """
        Public URL of a stored file: ``<prefix>/<owner_id>/<storage_key>``.

        Does not check that the file exists.
        """
        self._require_owner(owner_id)
        check_segment(owner_id, "owner id")
        check_segment(storage_key, "storage key")
        return (f"{self.url_prefix}/{quote(owner_id, safe='')}/"
                f"{quote(storage_key, safe='')}")

    @staticmethod
    def _require_owner(owner_id: str | None) -> None:
        if not owner_id:
            raise UnauthenticatedError("Caller identity is required")
