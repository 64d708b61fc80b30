"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from catalog.presentation import router as catalog_router
from infrastructure.database.dependencies import (
    close_database_connections,
    verify_database_connection,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import (
    get_oidc_settings,
    get_settings,
    get_storage_settings,
)
from infrastructure.version import __version__


@asynccontextmanager
async def catalog_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Reporting the storage and identity collaborators in use
    - Database engine lifecycle (created lazily, disposed on shutdown)
    """
    settings = get_settings()
    configure_logging(settings.log_level, app_name=settings.app_name)
    probe = DefaultStartupProbe()
    probe.application_started(app_name=settings.app_name, version=__version__)

    storage = get_storage_settings()
    probe.image_storage_configured(
        bucket=storage.bucket,
        has_fallback=storage.has_fallback,
        timeout_seconds=storage.upload_timeout_seconds,
    )
    oidc = get_oidc_settings()
    probe.identity_provider_configured(
        issuer_url=oidc.issuer_url, role_claim=oidc.role_claim
    )

    yield

    probe.application_stopping(app_name=settings.app_name)
    await close_database_connections()


app = FastAPI(
    title="DesignAuto Catalog API",
    description="Art groups, their format variations and reference data",
    version=__version__,
    lifespan=catalog_lifespan,
)

# Include Catalog bounded context routes
app.include_router(catalog_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db() -> dict:
    """Check database connection health."""
    connected = await verify_database_connection()
    return {
        "status": "ok" if connected else "unhealthy",
        "connected": connected,
    }
