"""Local filesystem storage backend."""

from __future__ import annotations

import mimetypes
import os
import shutil
from pathlib import Path
from typing import BinaryIO

from fastapi.concurrency import run_in_threadpool

from docgate.logging.setup import get_logger
from .backend import StorageBackend, StoredFile
from .errors import NotFoundError, StorageIOError, TooLargeError
from .paths import PathResolver

logger = get_logger(__name__)


class LocalStorageBackend(StorageBackend):
    """
    Local filesystem storage backend.

    Files are stored under one directory per owner:
    - Layout: <root>/<owner_id>/<uuid><ext>
    - Example: uploads/u1/a1b2c3d4-e5f6-7890-abcd-ef1234567890.pdf

    The filesystem is the only record; there is no metadata database.
    Blocking calls run in the worker thread pool.

    Security features:
    - Paths built only from validated (owner id, storage key) segments
    - Exclusive create, so an existing file is never overwritten
    - Stored files are read-only, no execute bit
    """

    def __init__(self, resolver: PathResolver, chunk_size: int = 64 * 1024):
        """
        Create the storage root if it is missing.

        Args:
            resolver: Path resolver rooted at the storage directory
            chunk_size: Copy buffer size in bytes
        """
        self.resolver = resolver
        self.chunk_size = chunk_size

        try:
            self.resolver.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(
                f"Failed to create storage root {self.resolver.root}: {e}") from e

    async def save(
        self,
        owner_id: str,
        storage_key: str,
        file_data: BinaryIO,
        max_bytes: int,
    ) -> int:
        target = self.resolver.resolve(owner_id, storage_key)
        return await run_in_threadpool(self._write, target, file_data, max_bytes)

    def _write(self, target: Path, file_data: BinaryIO, max_bytes: int) -> int:
        try:
            # Concurrent first uploads for the same owner converge here
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(
                f"Failed to create owner directory: {e}") from e

        written = 0
        created = False
        try:
            if file_data.seekable():
                file_data.seek(0)
            with open(target, "xb") as out:
                created = True
                for chunk in iter(lambda: file_data.read(self.chunk_size), b""):
                    written += len(chunk)
                    if written > max_bytes:
                        raise TooLargeError(
                            f"File too large (max {max_bytes} bytes)")
                    out.write(chunk)
            os.chmod(target, 0o444)
        except TooLargeError:
            self._discard(target, created)
            raise
        except OSError as e:
            self._discard(target, created)
            raise StorageIOError(f"Failed to save file: {e}") from e
        except BaseException:
            self._discard(target, created)
            raise

        return written

    @staticmethod
    def _discard(target: Path, created: bool) -> None:
        if not created:
            return
        try:
            target.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to remove partial file {target}: {e}")

    async def retrieve(self, owner_id: str, storage_key: str) -> bytes:
        target = self.resolver.resolve(owner_id, storage_key)
        return await run_in_threadpool(self._read, target, storage_key)

    @staticmethod
    def _read(target: Path, storage_key: str) -> bytes:
        try:
            return target.read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            raise NotFoundError(f"File not found: {storage_key}")
        except OSError as e:
            raise StorageIOError(f"Failed to retrieve file: {e}") from e

    async def delete(self, owner_id: str, storage_key: str) -> bool:
        target = self.resolver.resolve(owner_id, storage_key)
        return await run_in_threadpool(self._unlink, target)

    @staticmethod
    def _unlink(target: Path) -> bool:
        try:
            target.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageIOError(f"Failed to delete file: {e}") from e

    async def exists(self, owner_id: str, storage_key: str) -> bool:
        target = self.resolver.resolve(owner_id, storage_key)
        return await run_in_threadpool(target.is_file)

    async def list_files(self, owner_id: str) -> list[StoredFile]:
        owner_dir = self.resolver.owner_directory(owner_id)
        return await run_in_threadpool(self._scan, owner_id, owner_dir)

    @staticmethod
    def _scan(owner_id: str, owner_dir: Path) -> list[StoredFile]:
        entries = []
        try:
            with os.scandir(owner_dir) as it:
                for entry in it:
                    if not entry.is_file(follow_symlinks=False):
                        continue
                    stat = entry.stat(follow_symlinks=False)
                    entries.append((stat.st_mtime, entry.name, stat.st_size))
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageIOError(f"Failed to list files: {e}") from e

        entries.sort(key=lambda item: item[0], reverse=True)

        files = []
        for _, name, size in entries:
            mime_type, _ = mimetypes.guess_type(name)
            files.append(StoredFile(
                owner_id=owner_id,
                storage_key=name,
                original_name=name,
                size_bytes=size,
                mime_type=mime_type,
                extension=os.path.splitext(name)[1].lower() or None,
            ))
        return files

    async def delete_owner(self, owner_id: str) -> bool:
        owner_dir = self.resolver.owner_directory(owner_id)
        return await run_in_threadpool(self._remove_tree, owner_dir)

    @staticmethod
    def _remove_tree(owner_dir: Path) -> bool:
        try:
            shutil.rmtree(owner_dir)
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageIOError(f"Failed to delete owner directory: {e}") from e
