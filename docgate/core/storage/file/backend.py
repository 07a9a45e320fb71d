"""Abstract storage backend and the stored file record."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO, Any


class StoredFile:
    """A file persisted for one owner."""

    def __init__(
        self,
        owner_id: str,
        storage_key: str,
        original_name: str,
        size_bytes: int,
        mime_type: str | None = None,
        extension: str | None = None,
    ):
        self.owner_id = owner_id
        self.storage_key = storage_key
        self.original_name = original_name
        self.size_bytes = size_bytes
        self.mime_type = mime_type
        self.extension = extension

    def to_dict(self) -> dict[str, Any]:
        return {
            "owner_id": self.owner_id,
            "storage_key": self.storage_key,
            "original_name": self.original_name,
            "size_bytes": self.size_bytes,
            "mime_type": self.mime_type,
            "extension": self.extension,
        }

    def __repr__(self) -> str:
        return (f"StoredFile(owner_id={self.owner_id!r}, "
                f"storage_key={self.storage_key!r}, size_bytes={self.size_bytes})")


class StorageBackend(ABC):
    """
    Owner-scoped file storage.

    Every method takes the owner id explicitly; there is no way to address
    a file by storage key alone.

    Implementations:
    - LocalStorageBackend: one directory per owner on the local filesystem
    """

    @abstractmethod
    async def save(
        self,
        owner_id: str,
        storage_key: str,
        file_data: BinaryIO,
        max_bytes: int,
    ) -> int:
        """
        Write a new file.

        Args:
            owner_id: Owner namespace
            storage_key: Fresh key; must not exist yet
            file_data: Binary stream positioned anywhere (rewound first)
            max_bytes: Abort if the stream yields more than this

        Returns:
            Number of bytes written

        Raises:
            TooLargeError: Stream exceeded max_bytes (nothing kept)
            StorageIOError: Directory creation or write failed
        """

    @abstractmethod
    async def retrieve(self, owner_id: str, storage_key: str) -> bytes:
        """
        Raises:
            NotFoundError: If the file does not exist
            StorageIOError: If reading fails
        """

    @abstractmethod
    async def delete(self, owner_id: str, storage_key: str) -> bool:
        """
        Returns:
            True if a file was removed, False if it was already absent

        Raises:
            StorageIOError: If deletion fails
        """

    @abstractmethod
    async def exists(self, owner_id: str, storage_key: str) -> bool:
        pass

    @abstractmethod
    async def list_files(self, owner_id: str) -> list[StoredFile]:
        """Files of one owner, newest first."""

    @abstractmethod
    async def delete_owner(self, owner_id: str) -> bool:
        """
        Remove every file of an owner.

        Returns:
            True if anything was removed
        """
