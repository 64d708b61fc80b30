"""Application-level value objects for the Catalog context.

These carry request input into the services. Nothing in the application
layer reads caller identity from ambient state; it is always passed in as a
``Caller``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import StrEnum

from catalog.domain.value_objects import GroupStatus
from catalog.ports.storage import ImageUpload


class CallerRole(StrEnum):
    """Roles a caller can act with."""

    ANONYMOUS = "anonymous"
    USER = "user"
    DESIGNER = "designer"
    DESIGNER_ADMIN = "designer_admin"
    ADMIN = "admin"

    @classmethod
    def from_claim(cls, value: str | None) -> CallerRole:
        """Map a role claim issued by the identity provider.

        Unknown or missing roles degrade to an ordinary user: an authenticated
        caller is never anonymous, and never more privileged than asserted.
        """
        if not value:
            return cls.USER
        normalized = value.strip().lower()
        aliases = {"designer_adm": cls.DESIGNER_ADMIN}
        if normalized in aliases:
            return aliases[normalized]
        try:
            role = cls(normalized)
        except ValueError:
            return cls.USER
        return cls.USER if role is cls.ANONYMOUS else role


@dataclass(frozen=True)
class Caller:
    """Who is performing an operation.

    Attributes:
        id: Caller identifier from the identity provider (None when anonymous)
        role: Role the caller acts with
    """

    id: str | None
    role: CallerRole

    @classmethod
    def anonymous(cls) -> Caller:
        return cls(id=None, role=CallerRole.ANONYMOUS)

    @property
    def is_anonymous(self) -> bool:
        return self.id is None or self.role is CallerRole.ANONYMOUS


@dataclass(frozen=True)
class VariationInput:
    """Client-supplied data for one variation, before the image is stored."""

    format_id: str
    file_type_id: str
    image: ImageUpload
    edit_url: str | None = None


@dataclass(frozen=True)
class GroupUpdate:
    """Partial update of a group; None means "leave unchanged".

    ``is_visible`` and ``status`` are admin-only fields.
    """

    title: str | None = None
    category_id: str | None = None
    is_premium: bool | None = None
    is_visible: bool | None = None
    status: GroupStatus | None = None

    @property
    def changed_fields(self) -> list[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]

    @property
    def is_empty(self) -> bool:
        return not self.changed_fields

    @property
    def touches_admin_fields(self) -> bool:
        return self.is_visible is not None or self.status is not None
