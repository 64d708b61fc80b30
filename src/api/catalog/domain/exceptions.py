"""Domain exceptions for the Catalog bounded context.

Every catalog error carries a stable ``code`` that the presentation layer
exposes to API callers unchanged.
"""


class CatalogError(Exception):
    """Base class for all catalog errors."""

    code = "catalog_error"


class NotFoundError(CatalogError):
    """Raised when a group, variation or reference row does not exist.

    Also used for hidden groups the caller may not see, so that the
    existence of hidden content is never revealed.
    """

    code = "not_found"


class VariationNotFoundError(NotFoundError):
    """Raised when a variation does not belong to the addressed group."""

    pass


class CatalogValidationError(CatalogError):
    """Raised when an input is missing, malformed or out of range."""

    code = "validation_error"


class LastVariationError(CatalogError):
    """Raised when removing the only remaining variation of a group.

    A group may never be left without variations; the caller must delete
    the whole group instead.
    """

    code = "last_variation"


class NoOpError(CatalogError):
    """Raised when an update request carries no fields to change."""

    code = "no_op"


class DuplicateFormatError(CatalogError):
    """Raised when a group already holds a variation in the requested format."""

    code = "duplicate_format"
