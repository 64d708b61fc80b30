"""Catalog presentation layer.

Organized per resource (groups, variations, reference data); each package
holds its own routes and models.
"""

from __future__ import annotations

from fastapi import APIRouter

from catalog.presentation import groups, reference, variations

# Callers are resolved per endpoint; every route accepts anonymous callers
# and enforces roles in the application services.
router = APIRouter(
    prefix="/catalog",
    tags=["catalog"],
)

router.include_router(groups.router)
router.include_router(variations.router)
router.include_router(reference.router)

__all__ = ["router"]
