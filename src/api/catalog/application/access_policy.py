"""Stateless access predicates for catalog operations.

Admin-tier roles (``admin`` and ``designer_admin``) may manage every group.
Designers may publish and manage their own groups. Hidden groups are visible
only to their owner and to admin-tier callers.
"""

from __future__ import annotations

from catalog.application.value_objects import Caller, CallerRole
from catalog.domain.aggregates import ArtGroup

ADMIN_TIER = frozenset({CallerRole.ADMIN, CallerRole.DESIGNER_ADMIN})
PUBLISHERS = ADMIN_TIER | {CallerRole.DESIGNER}


class AccessPolicy:
    """Predicates consumed by the catalog services.

    Holds no state; a single instance can be shared across requests.
    """

    def is_admin(self, caller: Caller) -> bool:
        return not caller.is_anonymous and caller.role in ADMIN_TIER

    def is_owner(self, caller: Caller, group: ArtGroup) -> bool:
        return caller.id is not None and group.is_owned_by(caller.id)

    def can_publish(self, caller: Caller) -> bool:
        """Designers and admin-tier callers may create groups."""
        return not caller.is_anonymous and caller.role in PUBLISHERS

    def can_manage_group(self, caller: Caller, group: ArtGroup) -> bool:
        """Owner-or-admin: edit metadata and variations."""
        return self.is_admin(caller) or (
            self.is_owner(caller, group) and caller.role in PUBLISHERS
        )

    def can_delete_group(self, caller: Caller) -> bool:
        return self.is_admin(caller)

    def can_change_visibility(self, caller: Caller) -> bool:
        """Visibility and status are admin-only."""
        return self.is_admin(caller)

    def can_view_group(self, caller: Caller, group: ArtGroup) -> bool:
        """Visible groups are public; hidden ones need owner or admin-tier."""
        return (
            group.is_visible
            or self.is_admin(caller)
            or self.is_owner(caller, group)
        )

    def can_see_hidden_listing(self, caller: Caller) -> bool:
        return self.is_admin(caller)

    def can_manage_reference_data(self, caller: Caller) -> bool:
        return self.is_admin(caller)
