"""HTTP routes for the variations of an art group."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from catalog.application.services import VariationService
from catalog.application.value_objects import Caller, VariationInput
from catalog.dependencies import (
    get_caller,
    get_max_upload_bytes,
    get_variation_service,
)
from catalog.domain.exceptions import CatalogError
from catalog.presentation.errors import to_http_exception
from catalog.presentation.uploads import read_upload
from catalog.presentation.variations.models import (
    EditLinkRequest,
    RemoveVariationResponse,
    VariationResponse,
)

router = APIRouter(
    prefix="/groups/{group_id}/variations",
    tags=["variations"],
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Add a variation",
    responses={
        201: {"description": "Variation added"},
        403: {"description": "Caller is neither owner nor admin"},
        404: {"description": "Group, format or file type not found"},
        409: {"description": "Format already present, or concurrent change"},
        413: {"description": "Image is above the upload size limit"},
        502: {"description": "Image storage failed"},
    },
)
async def add_variation(
    group_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[VariationService, Depends(get_variation_service)],
    max_upload_bytes: Annotated[int, Depends(get_max_upload_bytes)],
    format_id: Annotated[str, Form()],
    file_type_id: Annotated[str, Form()],
    image: Annotated[UploadFile, File()],
    edit_url: Annotated[str | None, Form()] = None,
    make_primary: Annotated[bool, Form()] = False,
) -> VariationResponse:
    try:
        upload = await read_upload(image, max_upload_bytes)
        variation = await service.add_variation(
            caller,
            group_id,
            VariationInput(
                format_id=format_id,
                file_type_id=file_type_id,
                image=upload,
                edit_url=edit_url or None,
            ),
            make_primary=make_primary,
        )
    except CatalogError as e:
        raise to_http_exception(e) from e
    return VariationResponse.from_domain(variation)


@router.put("/{variation_id}/primary")
async def set_primary(
    group_id: str,
    variation_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[VariationService, Depends(get_variation_service)],
) -> VariationResponse:
    """Make a variation the group's primary.

    Idempotent: setting the current primary again changes nothing.
    """
    try:
        variation = await service.set_primary(caller, group_id, variation_id)
    except CatalogError as e:
        raise to_http_exception(e) from e
    return VariationResponse.from_domain(variation)


@router.patch("/{variation_id}")
async def edit_variation_link(
    group_id: str,
    variation_id: str,
    request: EditLinkRequest,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[VariationService, Depends(get_variation_service)],
) -> VariationResponse:
    try:
        variation = await service.edit_variation_link(
            caller, group_id, variation_id, request.edit_url or None
        )
    except CatalogError as e:
        raise to_http_exception(e) from e
    return VariationResponse.from_domain(variation)


@router.delete(
    "/{variation_id}",
    responses={
        200: {"description": "Variation removed"},
        409: {"description": "It is the group's last variation"},
    },
)
async def remove_variation(
    group_id: str,
    variation_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[VariationService, Depends(get_variation_service)],
) -> RemoveVariationResponse:
    """Remove a variation; a removed primary is succeeded by the newest one."""
    try:
        successor = await service.remove_variation(caller, group_id, variation_id)
    except CatalogError as e:
        raise to_http_exception(e) from e
    return RemoveVariationResponse(
        removed_variation_id=variation_id,
        new_primary=VariationResponse.from_domain(successor) if successor else None,
    )
