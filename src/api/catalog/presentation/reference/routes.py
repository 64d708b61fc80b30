"""HTTP routes for categories, formats and file types.

The three kinds share the same shape, so their routes are registered from
one table.
"""

from __future__ import annotations

from typing import Annotated, Awaitable, Callable

from fastapi import APIRouter, Depends, status

from catalog.application.services import ReferenceDataService
from catalog.application.value_objects import Caller
from catalog.dependencies import get_caller, get_reference_data_service
from catalog.domain.aggregates import ReferenceKind
from catalog.domain.exceptions import CatalogError
from catalog.presentation.errors import to_http_exception
from catalog.presentation.reference.models import (
    CreateReferenceEntryRequest,
    ReferenceEntryResponse,
    UpdateReferenceEntryRequest,
)

router = APIRouter(tags=["reference data"])

PATHS: dict[ReferenceKind, str] = {
    ReferenceKind.CATEGORY: "/categories",
    ReferenceKind.FORMAT: "/formats",
    ReferenceKind.FILE_TYPE: "/file-types",
}


def _list_endpoint(
    kind: ReferenceKind,
) -> Callable[..., Awaitable[list[ReferenceEntryResponse]]]:
    async def list_entries(
        service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
    ) -> list[ReferenceEntryResponse]:
        entries = await service.list_entries(kind)
        return [ReferenceEntryResponse.from_domain(e) for e in entries]

    list_entries.__name__ = f"list_{kind.value}_entries"
    return list_entries


def _create_endpoint(
    kind: ReferenceKind,
) -> Callable[..., Awaitable[ReferenceEntryResponse]]:
    async def create_entry(
        request: CreateReferenceEntryRequest,
        caller: Annotated[Caller, Depends(get_caller)],
        service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
    ) -> ReferenceEntryResponse:
        try:
            entry = await service.create_entry(
                caller, kind, name=request.name, slug=request.slug
            )
        except CatalogError as e:
            raise to_http_exception(e) from e
        return ReferenceEntryResponse.from_domain(entry)

    create_entry.__name__ = f"create_{kind.value}_entry"
    return create_entry


def _update_endpoint(
    kind: ReferenceKind,
) -> Callable[..., Awaitable[ReferenceEntryResponse]]:
    async def update_entry(
        entry_id: str,
        request: UpdateReferenceEntryRequest,
        caller: Annotated[Caller, Depends(get_caller)],
        service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
    ) -> ReferenceEntryResponse:
        try:
            entry = await service.update_entry(
                caller, kind, entry_id, name=request.name, slug=request.slug
            )
        except CatalogError as e:
            raise to_http_exception(e) from e
        return ReferenceEntryResponse.from_domain(entry)

    update_entry.__name__ = f"update_{kind.value}_entry"
    return update_entry


def _delete_endpoint(kind: ReferenceKind) -> Callable[..., Awaitable[None]]:
    async def delete_entry(
        entry_id: str,
        caller: Annotated[Caller, Depends(get_caller)],
        service: Annotated[ReferenceDataService, Depends(get_reference_data_service)],
    ) -> None:
        try:
            await service.delete_entry(caller, kind, entry_id)
        except CatalogError as e:
            raise to_http_exception(e) from e

    delete_entry.__name__ = f"delete_{kind.value}_entry"
    return delete_entry


for _kind, _path in PATHS.items():
    router.add_api_route(
        _path,
        _list_endpoint(_kind),
        methods=["GET"],
        summary=f"List {_kind.value.replace('_', ' ')} entries",
    )
    router.add_api_route(
        _path,
        _create_endpoint(_kind),
        methods=["POST"],
        status_code=status.HTTP_201_CREATED,
        summary=f"Create a {_kind.value.replace('_', ' ')} (admin only)",
        responses={
            403: {"description": "Caller is not an admin"},
            409: {"description": "Slug already taken"},
        },
    )
    router.add_api_route(
        f"{_path}/{{entry_id}}",
        _update_endpoint(_kind),
        methods=["PATCH"],
        summary=f"Update a {_kind.value.replace('_', ' ')} (admin only)",
        responses={
            403: {"description": "Caller is not an admin"},
            404: {"description": "Entry not found"},
            409: {"description": "Slug already taken"},
        },
    )
    router.add_api_route(
        f"{_path}/{{entry_id}}",
        _delete_endpoint(_kind),
        methods=["DELETE"],
        status_code=status.HTTP_204_NO_CONTENT,
        summary=f"Delete an unused {_kind.value.replace('_', ' ')} (admin only)",
        responses={
            403: {"description": "Caller is not an admin"},
            404: {"description": "Entry not found"},
            409: {"description": "Entry is still used by published art"},
        },
    )
