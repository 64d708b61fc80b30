"""HTTP routes for art groups."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from catalog.application.services import ArtGroupQueryService, ArtGroupService
from catalog.application.value_objects import Caller, VariationInput
from catalog.dependencies import (
    get_art_group_query_service,
    get_art_group_service,
    get_caller,
    get_max_upload_bytes,
)
from catalog.domain.exceptions import CatalogError, CatalogValidationError
from catalog.ports.read_models import GroupListFilters, GroupSortField, SortDirection
from catalog.presentation.errors import to_http_exception
from catalog.presentation.groups.models import (
    GroupPageResponse,
    GroupResponse,
    GroupSummaryResponse,
    UpdateGroupRequest,
)
from catalog.presentation.uploads import read_upload

router = APIRouter(
    prefix="/groups",
    tags=["groups"],
)


@router.get(
    "",
    summary="List art groups",
    description="Paginated listing annotated with each group's primary variation",
    responses={
        200: {"description": "Groups listed successfully"},
        400: {"description": "Invalid paging or filter value"},
    },
)
async def list_groups(
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[ArtGroupQueryService, Depends(get_art_group_query_service)],
    search: str | None = None,
    category_id: str | None = None,
    designer_id: str | None = None,
    format_id: str | None = None,
    is_premium: bool | None = None,
    include_hidden: bool = False,
    sort: GroupSortField = GroupSortField.CREATED_AT,
    direction: SortDirection = SortDirection.DESC,
    page: int = 1,
    page_size: Annotated[int | None, Query()] = None,
) -> GroupPageResponse:
    """List groups, newest first by default.

    ``include_hidden`` only has an effect for admin-tier callers.
    """
    filters = GroupListFilters(
        search=search,
        category_id=category_id,
        designer_id=designer_id,
        format_id=format_id,
        is_premium=is_premium,
        include_hidden=include_hidden,
        sort=sort,
        direction=direction,
    )
    try:
        result = await service.list_groups(
            caller, filters, page=page, page_size=page_size
        )
    except CatalogError as e:
        raise to_http_exception(e) from e
    return GroupPageResponse.from_read_model(result)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Publish an art group",
    description=(
        "Repeat format_id, image and optionally file_type_id and edit_url once "
        "per variation; the first variation becomes the primary"
    ),
    responses={
        201: {"description": "Group created with all of its variations"},
        400: {"description": "Invalid input or image"},
        403: {"description": "Caller may not publish"},
        404: {"description": "Category, format or file type not found"},
        409: {"description": "A format is listed more than once"},
        413: {"description": "An image is above the upload size limit"},
        502: {"description": "Image storage failed"},
    },
)
async def create_group(
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[ArtGroupService, Depends(get_art_group_service)],
    max_upload_bytes: Annotated[int, Depends(get_max_upload_bytes)],
    title: Annotated[str, Form()],
    category_id: Annotated[str, Form()],
    format_id: Annotated[list[str], Form()],
    file_type_id: Annotated[list[str], Form()],
    image: Annotated[list[UploadFile], File()],
    edit_url: Annotated[list[str] | None, Form()] = None,
    is_premium: Annotated[bool, Form()] = False,
) -> GroupResponse:
    """Create a group together with all of its initial variations.

    The caller becomes the owning designer. A single file_type_id applies
    to every variation.
    """
    try:
        variations = await _variation_inputs(
            format_id, file_type_id, image, edit_url, max_upload_bytes
        )
        group = await service.create_group(
            caller,
            title=title,
            category_id=category_id,
            variations=variations,
            is_premium=is_premium,
        )
    except CatalogError as e:
        raise to_http_exception(e) from e
    return GroupResponse.from_domain(group)


async def _variation_inputs(
    format_ids: list[str],
    file_type_ids: list[str],
    images: list[UploadFile],
    edit_urls: list[str] | None,
    max_upload_bytes: int,
) -> list[VariationInput]:
    """Pair repeated multipart parts into one input per variation."""
    count = len(images)
    if len(format_ids) != count:
        raise CatalogValidationError("Send one format_id per image")
    if len(file_type_ids) == 1:
        file_type_ids = file_type_ids * count
    elif len(file_type_ids) != count:
        raise CatalogValidationError("Send one file_type_id, or one per image")
    if edit_urls is None:
        edit_urls = [""] * count
    elif len(edit_urls) != count:
        raise CatalogValidationError("Send one edit_url per image, or none")

    return [
        VariationInput(
            format_id=format_id,
            file_type_id=file_type_id,
            image=await read_upload(upload, max_upload_bytes),
            edit_url=edit_url or None,
        )
        for format_id, file_type_id, upload, edit_url in zip(
            format_ids, file_type_ids, images, edit_urls
        )
    ]


@router.get("/{group_id}")
async def get_group(
    group_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[ArtGroupQueryService, Depends(get_art_group_query_service)],
) -> GroupResponse:
    """Get a group with all of its variations.

    Counts a view. Hidden groups are reported as not found unless the caller
    owns the group or is admin-tier.
    """
    try:
        group = await service.get_group(caller, group_id)
    except CatalogError as e:
        raise to_http_exception(e) from e
    return GroupResponse.from_domain(group)


@router.patch(
    "/{group_id}",
    summary="Update an art group",
    responses={
        200: {"description": "Group updated"},
        400: {"description": "Empty or invalid update"},
        403: {"description": "Caller may not change a requested field"},
        404: {"description": "Group or category not found"},
    },
)
async def update_group(
    group_id: str,
    request: UpdateGroupRequest,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[ArtGroupService, Depends(get_art_group_service)],
) -> GroupResponse:
    try:
        group = await service.update_group(caller, group_id, request.to_update())
    except CatalogError as e:
        raise to_http_exception(e) from e
    return GroupResponse.from_domain(group)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[ArtGroupService, Depends(get_art_group_service)],
) -> None:
    """Delete a group and all of its variations (admin only)."""
    try:
        await service.delete_group(caller, group_id)
    except CatalogError as e:
        raise to_http_exception(e) from e


@router.get("/{group_id}/related")
async def list_related(
    group_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[ArtGroupQueryService, Depends(get_art_group_query_service)],
    limit: int | None = None,
) -> list[GroupSummaryResponse]:
    """Visible groups sharing the category or the designer of a group."""
    try:
        related = await service.list_related(caller, group_id, limit=limit)
    except CatalogError as e:
        raise to_http_exception(e) from e
    return [GroupSummaryResponse.from_read_model(s) for s in related]


@router.post("/{group_id}/downloads", status_code=status.HTTP_204_NO_CONTENT)
async def record_download(
    group_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[ArtGroupService, Depends(get_art_group_service)],
) -> None:
    """Count a download of a group."""
    try:
        await service.record_download(caller, group_id)
    except CatalogError as e:
        raise to_http_exception(e) from e
