"""
Standardized error responses for the docgate API.

Every error body has the shape ``{"error": {"message", "code", ...}}``.
"""

from __future__ import annotations

from typing import Any, NoReturn
from fastapi import HTTPException, status


def error_response(
    message: str,
    details: list[str] | None = None,
    field: str | None = None,
    code: str | None = None
) -> dict[str, Any]:
    """
    Create a standardized error body.

    Examples:
        >>> error_response("Invalid file type", code="INVALID_TYPE")
        {'error': {'message': 'Invalid file type', 'code': 'INVALID_TYPE'}}
    """
    error_dict: dict[str, Any] = {"message": message}

    if details is not None:
        error_dict["details"] = details

    if field is not None:
        error_dict["field"] = field

    if code is not None:
        error_dict["code"] = code

    return {"error": error_dict}


def raise_error(
    message: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    details: list[str] | None = None,
    field: str | None = None,
    code: str | None = None
) -> NoReturn:
    """
    Raise an HTTPException with the standardized error body.

    Examples:
        >>> raise_error("File not found", status_code=404, code="NOT_FOUND")
    """
    raise HTTPException(
        status_code=status_code,
        detail=error_response(message, details, field, code)
    )


def invalid_type_error(message: str) -> NoReturn:
    raise_error(
        message=message,
        status_code=status.HTTP_400_BAD_REQUEST,
        field="file",
        code="INVALID_TYPE"
    )


def too_large_error(message: str) -> NoReturn:
    raise_error(
        message=message,
        status_code=413,
        field="file",
        code="TOO_LARGE"
    )


def invalid_path_error(message: str) -> NoReturn:
    raise_error(
        message=message,
        status_code=status.HTTP_400_BAD_REQUEST,
        code="INVALID_PATH"
    )


def not_found_error(resource: str, resource_id: str | None = None) -> NoReturn:
    message = f"{resource} not found"
    if resource_id:
        message = f"{resource} '{resource_id}' not found"

    raise_error(
        message=message,
        status_code=status.HTTP_404_NOT_FOUND,
        code="NOT_FOUND"
    )


def authentication_error(message: str = "Authentication required") -> NoReturn:
    raise_error(
        message=message,
        status_code=status.HTTP_401_UNAUTHORIZED,
        code="AUTHENTICATION_FAILED"
    )


def storage_error(operation: str) -> NoReturn:
    raise_error(
        message=f"Storage operation failed: {operation}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="STORAGE_ERROR"
    )
