"""Variation routes."""

from catalog.presentation.variations.routes import router

__all__ = ["router"]
