"""Read-side service for the Catalog bounded context.

Serves paginated listings, single groups with all their variations, and
related groups. Hidden groups are only returned to their owner and to
admin-tier callers; everyone else gets a not-found.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Protocol

from catalog.application.access_policy import AccessPolicy
from catalog.application.observability import (
    ArtGroupQueryServiceProbe,
    DefaultArtGroupQueryServiceProbe,
)
from catalog.application.services.support import parse_identifier
from catalog.application.value_objects import Caller
from catalog.domain.aggregates import ArtGroup
from catalog.domain.exceptions import CatalogValidationError
from catalog.domain.value_objects import ArtGroupId, CategoryId, FormatId
from catalog.ports.exceptions import GroupNotFoundError
from catalog.ports.read_models import ArtGroupSummary, GroupListFilters, GroupPage
from catalog.ports.repositories import IArtGroupQueryRepository, IArtGroupRepository


class ViewRecorder(Protocol):
    """Something that can count a view of a group, best-effort."""

    async def increment_view_count(self, group_id: ArtGroupId) -> None: ...


class ArtGroupQueryService:
    """Application service for catalog reads."""

    def __init__(
        self,
        group_repository: IArtGroupRepository,
        query_repository: IArtGroupQueryRepository,
        view_recorder: ViewRecorder,
        default_page_size: int = 24,
        max_page_size: int = 100,
        related_limit: int = 8,
        access_policy: AccessPolicy | None = None,
        probe: ArtGroupQueryServiceProbe | None = None,
    ):
        """Initialize ArtGroupQueryService with dependencies.

        Args:
            group_repository: Repository used to load single groups
            query_repository: Repository producing listing projections
            view_recorder: Receives a best-effort view per successful get_group
            default_page_size: Page size when the caller does not ask for one
            max_page_size: Upper bound for requested page sizes
            related_limit: Default number of related groups
            access_policy: Access predicates (a shared default when omitted)
            probe: Optional domain probe for observability
        """
        self._group_repository = group_repository
        self._query_repository = query_repository
        self._view_recorder = view_recorder
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size
        self._related_limit = related_limit
        self._policy = access_policy or AccessPolicy()
        self._probe = probe or DefaultArtGroupQueryServiceProbe()

    async def list_groups(
        self,
        caller: Caller,
        filters: GroupListFilters,
        page: int = 1,
        page_size: int | None = None,
    ) -> GroupPage:
        """List groups matching ``filters``, newest first by default.

        ``include_hidden`` is honored only for admin-tier callers; for anyone
        else hidden groups are silently excluded.

        Raises:
            CatalogValidationError: If paging values or id filters are malformed
        """
        if page < 1:
            raise CatalogValidationError("page must be >= 1")
        size = self._default_page_size if page_size is None else page_size
        if size < 1:
            raise CatalogValidationError("page_size must be >= 1")
        size = min(size, self._max_page_size)

        if filters.category_id is not None:
            parse_identifier(CategoryId, filters.category_id, "category id")
        if filters.format_id is not None:
            parse_identifier(FormatId, filters.format_id, "format id")

        search = filters.search.strip() if filters.search else None
        resolved = replace(
            filters,
            search=search or None,
            include_hidden=filters.include_hidden
            and self._policy.can_see_hidden_listing(caller),
        )

        items, total = await self._query_repository.list_groups(
            resolved, offset=(page - 1) * size, limit=size
        )

        self._probe.groups_listed(
            total=total,
            page=page,
            page_size=size,
            include_hidden=resolved.include_hidden,
        )
        return GroupPage(page=page, page_size=size, total=total, items=items)

    async def get_group(self, caller: Caller, group_id: str) -> ArtGroup:
        """Return a group with all variations and count the view.

        Raises:
            GroupNotFoundError: If the group is missing or hidden from the caller
        """
        group = await self._load_visible(caller, group_id)
        await self._view_recorder.increment_view_count(group.id)
        return group

    async def list_related(
        self, caller: Caller, group_id: str, limit: int | None = None
    ) -> list[ArtGroupSummary]:
        """Visible groups sharing the category or the designer of a group.

        Raises:
            GroupNotFoundError: If the group is missing or hidden from the caller
            CatalogValidationError: If ``limit`` is not positive
        """
        size = self._related_limit if limit is None else limit
        if size < 1:
            raise CatalogValidationError("limit must be >= 1")
        group = await self._load_visible(caller, group_id)
        return await self._query_repository.list_related(
            group, limit=min(size, self._max_page_size)
        )

    async def _load_visible(self, caller: Caller, group_id: str) -> ArtGroup:
        try:
            gid = ArtGroupId.from_string(group_id)
        except ValueError:
            # Malformed ids are indistinguishable from unknown ones
            raise GroupNotFoundError(f"Art group {group_id} not found") from None

        group = await self._group_repository.get_by_id(gid)
        if group is None:
            raise GroupNotFoundError(f"Art group {group_id} not found")
        if not self._policy.can_view_group(caller, group):
            self._probe.hidden_group_concealed(group_id=gid.value, caller_id=caller.id)
            raise GroupNotFoundError(f"Art group {group_id} not found")
        return group
