"""Pydantic models for variation API requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from catalog.presentation.groups.models import VariationResponse


class EditLinkRequest(BaseModel):
    """Replace or clear a variation's external edit link."""

    edit_url: str | None = Field(
        default=None, description="http(s) link to the editable source, or null"
    )


class RemoveVariationResponse(BaseModel):
    """Outcome of removing a variation."""

    removed_variation_id: str
    new_primary: VariationResponse | None = Field(
        default=None,
        description="Variation that inherited the primary flag, if the "
        "removed one was primary",
    )


__all__ = ["EditLinkRequest", "RemoveVariationResponse", "VariationResponse"]
