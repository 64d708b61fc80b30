"""Art group routes."""

from catalog.presentation.groups.routes import router

__all__ = ["router"]
