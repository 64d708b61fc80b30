"""Helpers shared by the catalog application services."""

from __future__ import annotations

from typing import Protocol, TypeVar

from catalog.domain.aggregates import ReferenceKind
from catalog.domain.exceptions import CatalogValidationError
from catalog.ports.exceptions import ReferenceNotFoundError, UploadTooLargeError
from catalog.ports.repositories import IReferenceDataRepository
from catalog.ports.storage import ImageUpload


class _ParsableId(Protocol):
    @classmethod
    def from_string(cls, value: str) -> "_ParsableId": ...


IdT = TypeVar("IdT", bound=_ParsableId)

_LABELS = {
    ReferenceKind.CATEGORY: "Category",
    ReferenceKind.FORMAT: "Format",
    ReferenceKind.FILE_TYPE: "File type",
}


def parse_identifier(id_type: type[IdT], value: str, label: str) -> IdT:
    """Parse a client-supplied identifier.

    Raises:
        CatalogValidationError: If the value is malformed
    """
    try:
        return id_type.from_string(value)  # type: ignore[return-value]
    except ValueError as e:
        raise CatalogValidationError(f"Invalid {label}: {value!r}") from e


async def ensure_reference_exists(
    repository: IReferenceDataRepository, kind: ReferenceKind, entry_id: str
) -> None:
    """Raise ReferenceNotFoundError unless the reference row exists."""
    if not await repository.exists(kind, entry_id):
        raise ReferenceNotFoundError(f"{_LABELS[kind]} {entry_id} not found")


def ensure_upload_size(upload: ImageUpload, max_bytes: int) -> None:
    """Raise UploadTooLargeError if the image is above the size limit."""
    if upload.size > max_bytes:
        raise UploadTooLargeError(
            f"Image {upload.filename!r} is {upload.size} bytes; "
            f"the limit is {max_bytes} bytes"
        )
