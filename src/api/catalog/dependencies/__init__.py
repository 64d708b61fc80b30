"""FastAPI dependencies for the Catalog bounded context."""

from catalog.dependencies.authentication import (
    get_caller,
    get_jwt_validator,
    get_observation_context,
)
from catalog.dependencies.services import (
    build_image_storage,
    get_art_group_query_service,
    get_art_group_service,
    get_image_storage,
    get_max_upload_bytes,
    get_reference_data_service,
    get_variation_service,
)

__all__ = [
    "build_image_storage",
    "get_art_group_query_service",
    "get_art_group_service",
    "get_caller",
    "get_image_storage",
    "get_jwt_validator",
    "get_max_upload_bytes",
    "get_observation_context",
    "get_reference_data_service",
    "get_variation_service",
]
