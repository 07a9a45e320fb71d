"""Tests for LocalStorageBackend."""

from __future__ import annotations

import io
import os
import stat

import pytest

from docgate.core.storage.file.errors import NotFoundError, TooLargeError
from docgate.core.storage.file.local_backend import LocalStorageBackend
from docgate.core.storage.file.paths import PathResolver


class UnseekableStream(io.RawIOBase):
    """Read-only stream that cannot report its size."""

    def __init__(self, data: bytes):
        self._buffer = io.BytesIO(data)

    def readable(self):
        return True

    def seekable(self):
        return False

    def read(self, size=-1):
        return self._buffer.read(size)


class FailingStream(io.RawIOBase):
    """Stream that yields one chunk and then fails, like a closed upload."""

    def __init__(self, first_chunk: bytes):
        self._first_chunk = first_chunk
        self._served = False

    def readable(self):
        return True

    def seekable(self):
        return False

    def read(self, size=-1):
        if self._served:
            raise ValueError("I/O operation on closed file.")
        self._served = True
        return self._first_chunk


@pytest.fixture
def storage_root(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def storage_backend(storage_root):
    return LocalStorageBackend(PathResolver(storage_root), chunk_size=1024)


def test_init_creates_root(storage_backend, storage_root):
    assert storage_root.is_dir()


async def test_save_and_retrieve_file(storage_backend, storage_root):
    content = b"test file content"

    written = await storage_backend.save(
        "user1", "abc.pdf", io.BytesIO(content), max_bytes=1024)

    assert written == len(content)
    assert (storage_root / "user1" / "abc.pdf").read_bytes() == content
    assert await storage_backend.retrieve("user1", "abc.pdf") == content


async def test_saved_file_is_read_only(storage_backend, storage_root):
    await storage_backend.save("user1", "ro.pdf", io.BytesIO(b"x"), 1024)

    mode = stat.S_IMODE(os.stat(storage_root / "user1" / "ro.pdf").st_mode)
    assert mode == 0o444


async def test_save_rewinds_stream(storage_backend):
    stream = io.BytesIO(b"rewind me")
    stream.seek(5)

    await storage_backend.save("user1", "rewind.pdf", stream, 1024)

    assert await storage_backend.retrieve("user1", "rewind.pdf") == b"rewind me"


async def test_save_never_overwrites(storage_backend):
    await storage_backend.save("user1", "same.pdf", io.BytesIO(b"first"), 1024)

    with pytest.raises(OSError):
        await storage_backend.save("user1", "same.pdf", io.BytesIO(b"second"), 1024)

    assert await storage_backend.retrieve("user1", "same.pdf") == b"first"


async def test_oversized_stream_leaves_nothing(storage_backend, storage_root):
    stream = UnseekableStream(b"x" * 5000)

    with pytest.raises(TooLargeError):
        await storage_backend.save("user1", "big.pdf", stream, max_bytes=4096)

    assert not (storage_root / "user1" / "big.pdf").exists()


async def test_stream_failure_mid_copy_leaves_nothing(storage_backend, storage_root):
    with pytest.raises(ValueError):
        await storage_backend.save(
            "user1", "broken.pdf", FailingStream(b"x" * 100), max_bytes=4096)

    assert not (storage_root / "user1" / "broken.pdf").exists()


async def test_file_exists(storage_backend):
    assert not await storage_backend.exists("user1", "missing.pdf")

    await storage_backend.save("user1", "exists.pdf", io.BytesIO(b"test"), 1024)

    assert await storage_backend.exists("user1", "exists.pdf")
    assert not await storage_backend.exists("user2", "exists.pdf")


async def test_delete_file(storage_backend):
    await storage_backend.save("user1", "delete.pdf", io.BytesIO(b"bye"), 1024)

    assert await storage_backend.delete("user1", "delete.pdf")
    assert not await storage_backend.exists("user1", "delete.pdf")

    # Deleting again reports that nothing was removed
    assert not await storage_backend.delete("user1", "delete.pdf")


async def test_delete_keeps_owner_directory(storage_backend, storage_root):
    await storage_backend.save("user1", "one.pdf", io.BytesIO(b"1"), 1024)

    await storage_backend.delete("user1", "one.pdf")

    assert (storage_root / "user1").is_dir()


async def test_retrieve_missing_raises(storage_backend):
    with pytest.raises(NotFoundError):
        await storage_backend.retrieve("user1", "nothing.pdf")


async def test_list_files(storage_backend):
    assert await storage_backend.list_files("nobody") == []

    await storage_backend.save("user1", "a.pdf", io.BytesIO(b"x" * 10), 1024)
    await storage_backend.save("user1", "b.png", io.BytesIO(b"y" * 20), 1024)
    await storage_backend.save("user2", "c.pdf", io.BytesIO(b"z"), 1024)

    files = await storage_backend.list_files("user1")

    assert {f.storage_key for f in files} == {"a.pdf", "b.png"}
    by_key = {f.storage_key: f for f in files}
    assert by_key["a.pdf"].size_bytes == 10
    assert by_key["a.pdf"].mime_type == "application/pdf"
    assert by_key["b.png"].extension == ".png"
    assert all(f.owner_id == "user1" for f in files)


async def test_delete_owner(storage_backend, storage_root):
    await storage_backend.save("user1", "a.pdf", io.BytesIO(b"x"), 1024)
    await storage_backend.save("user2", "b.pdf", io.BytesIO(b"y"), 1024)

    assert await storage_backend.delete_owner("user1")

    assert not (storage_root / "user1").exists()
    assert await storage_backend.exists("user2", "b.pdf")
    assert not await storage_backend.delete_owner("user1")
