"""Reference data routes."""

from catalog.presentation.reference.routes import router

__all__ = ["router"]
