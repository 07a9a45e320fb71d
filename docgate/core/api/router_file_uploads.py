"""
File upload API router.

Owner-scoped endpoints over :class:`FileManager`. The caller id comes from
the identity header set by the upstream authentication layer; every
operation is confined to that caller's directory.
"""

from __future__ import annotations

import mimetypes

from fastapi import (
    APIRouter,
    Depends,
    File,
    Response,
    UploadFile,
    status,
)

from docgate.logging.setup import get_logger
from docgate.core.storage.file import (
    FileManager,
    InvalidPathError,
    InvalidTypeError,
    NotFoundError,
    StorageIOError,
    TooLargeError,
)
from docgate.core.api.dependencies import get_file_manager, require_identity
from docgate.core.api.errors import (
    invalid_path_error,
    invalid_type_error,
    not_found_error,
    storage_error,
    too_large_error,
)

logger = get_logger(__name__)

router = APIRouter(
    prefix="/files",
    tags=["files"]
)


@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    owner_id: str = Depends(require_identity),
    file_manager: FileManager = Depends(get_file_manager),
):
    """
    Upload a document for the calling user.

    Args:
        file: Uploaded file (multipart/form-data field ``file``)

    Returns:
        Stored file record with its storage key and public URL

    Raises:
        HTTPException:
            - 400: MIME type or extension not allowed
            - 401: Missing caller identity
            - 413: File too large
            - 500: Storage failure
    """
    logger.info(
        f"File upload request: owner={owner_id}, filename={file.filename!r}, "
        f"content_type={file.content_type!r}")

    try:
        stored = await file_manager.upload(
            owner_id=owner_id,
            file_data=file.file,
            declared_mime_type=file.content_type,
            original_filename=file.filename or "",
        )
    except InvalidTypeError as e:
        invalid_type_error(str(e))
    except TooLargeError as e:
        too_large_error(str(e))
    except InvalidPathError as e:
        invalid_path_error(str(e))
    except StorageIOError:
        storage_error("upload")
    finally:
        await file.close()

    return {
        **stored.to_dict(),
        "url": file_manager.url_for(owner_id, stored.storage_key),
        "message": "File uploaded successfully",
    }


@router.get("")
async def list_files(
    owner_id: str = Depends(require_identity),
    file_manager: FileManager = Depends(get_file_manager),
):
    """List the caller's files, newest first, with total usage."""
    try:
        files = await file_manager.list_files(owner_id)
    except InvalidPathError as e:
        invalid_path_error(str(e))
    except StorageIOError:
        storage_error("list")

    return {
        "files": [
            {**f.to_dict(), "url": file_manager.url_for(owner_id, f.storage_key)}
            for f in files
        ],
        "total_bytes": sum(f.size_bytes for f in files),
    }


@router.get("/{storage_key}/exists")
async def file_exists(
    storage_key: str,
    owner_id: str = Depends(require_identity),
    file_manager: FileManager = Depends(get_file_manager),
):
    try:
        exists = await file_manager.exists(owner_id, storage_key)
    except InvalidPathError as e:
        invalid_path_error(str(e))

    return {"storage_key": storage_key, "exists": exists}


@router.get("/{storage_key}/url")
async def file_url(
    storage_key: str,
    owner_id: str = Depends(require_identity),
    file_manager: FileManager = Depends(get_file_manager),
):
    """Public URL for a key. Does not check that the file exists."""
    try:
        url = file_manager.url_for(owner_id, storage_key)
    except InvalidPathError as e:
        invalid_path_error(str(e))

    return {"storage_key": storage_key, "url": url}


@router.get("/{storage_key}")
async def download_file(
    storage_key: str,
    owner_id: str = Depends(require_identity),
    file_manager: FileManager = Depends(get_file_manager),
):
    """
    Download one of the caller's files.

    Security headers:
    - Content-Disposition: attachment (force download)
    - X-Content-Type-Options: nosniff
    - Content-Security-Policy: sandbox
    """
    try:
        content = await file_manager.read(owner_id, storage_key)
    except InvalidPathError as e:
        invalid_path_error(str(e))
    except NotFoundError:
        not_found_error("File", storage_key)
    except StorageIOError:
        storage_error("download")

    media_type, _ = mimetypes.guess_type(storage_key)
    headers = {
        "Content-Disposition": f'attachment; filename="{storage_key}"',
        "X-Content-Type-Options": "nosniff",
        "Content-Security-Policy": "sandbox",
        "Cache-Control": "private, max-age=3600",
    }
    return Response(
        content=content,
        media_type=media_type or "application/octet-stream",
        headers=headers,
    )


@router.delete("/{storage_key}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(
    storage_key: str,
    owner_id: str = Depends(require_identity),
    file_manager: FileManager = Depends(get_file_manager),
):
    """Delete one of the caller's files. Succeeds when the file is already gone."""
    try:
        await file_manager.delete(owner_id, storage_key)
    except InvalidPathError as e:
        invalid_path_error(str(e))
    except StorageIOError:
        storage_error("delete")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
