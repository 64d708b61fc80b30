"""Port-level exceptions for the Catalog bounded context.

These complement the domain errors with failures that originate at the
boundaries: authorization, persistence conflicts and the image store.
"""

from catalog.domain.exceptions import (
    CatalogError,
    CatalogValidationError,
    NotFoundError,
)


class GroupNotFoundError(NotFoundError):
    """Raised when an art group does not exist or is hidden from the caller."""

    pass


class ReferenceNotFoundError(NotFoundError):
    """Raised when a category, format or file type reference does not exist."""

    pass


class PermissionDeniedError(CatalogError):
    """Raised when an identified caller lacks the role for an operation.

    Never raised for reads of hidden groups; those surface as not found.
    """

    code = "permission_denied"


class StorageFailureError(CatalogError):
    """Raised when the image storage collaborator could not store an upload.

    The surrounding unit is aborted and no variation row is written.
    """

    code = "storage_failure"


class ConcurrentModificationError(CatalogError):
    """Raised when a unit kept conflicting with concurrent writers.

    The caller may retry the request.
    """

    code = "concurrent_modification"


class DuplicateSlugError(CatalogError):
    """Raised when a reference entry slug is already taken."""

    code = "duplicate_slug"


class InvalidImageError(CatalogValidationError):
    """Raised when an upload is not a decodable image.

    Rejected before any storage provider is contacted, so no fallback is
    attempted.
    """

    pass


class UploadTooLargeError(CatalogValidationError):
    """Raised when an uploaded image exceeds the configured size limit."""

    code = "upload_too_large"


class ReferenceInUseError(CatalogError):
    """Raised when deleting a reference entry that art still points to."""

    code = "reference_in_use"
