"""Translation of catalog errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from catalog.domain.exceptions import CatalogError

STATUS_BY_CODE: dict[str, int] = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "permission_denied": status.HTTP_403_FORBIDDEN,
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "no_op": status.HTTP_400_BAD_REQUEST,
    "storage_failure": status.HTTP_502_BAD_GATEWAY,
    "last_variation": status.HTTP_409_CONFLICT,
    "duplicate_format": status.HTTP_409_CONFLICT,
    "duplicate_slug": status.HTTP_409_CONFLICT,
    "concurrent_modification": status.HTTP_409_CONFLICT,
    "reference_in_use": status.HTTP_409_CONFLICT,
    # Starlette renamed the 413 constant; the number is stable
    "upload_too_large": 413,
}


def to_http_exception(error: CatalogError) -> HTTPException:
    """Map a catalog error to an HTTPException carrying its stable code.

    The body is ``{"detail": {"code": ..., "message": ...}}``.
    """
    return HTTPException(
        status_code=STATUS_BY_CODE.get(
            error.code, status.HTTP_500_INTERNAL_SERVER_ERROR
        ),
        detail={"code": error.code, "message": str(error)},
    )
