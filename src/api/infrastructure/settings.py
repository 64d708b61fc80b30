"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from enum import StrEnum
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IsolationLevel(StrEnum):
    """Transaction isolation levels accepted for primary-changing units."""

    REPEATABLE_READ = "REPEATABLE READ"
    SERIALIZABLE = "SERIALIZABLE"


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        DESIGNAUTO_DB_HOST: Database host (default: localhost)
        DESIGNAUTO_DB_PORT: Database port (default: 5432)
        DESIGNAUTO_DB_DATABASE: Database name (default: designauto)
        DESIGNAUTO_DB_USERNAME: Database user (default: designauto)
        DESIGNAUTO_DB_PASSWORD: Database password (required in production)
        DESIGNAUTO_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        DESIGNAUTO_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
        DESIGNAUTO_DB_ECHO: Log every SQL statement (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="DESIGNAUTO_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="designauto", description="Database name")
    username: str = Field(default="designauto", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )
    echo: bool = Field(default=False, description="Log SQL statements")

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class CatalogSettings(BaseSettings):
    """Catalog behaviour settings.

    Environment variables:
        DESIGNAUTO_CATALOG_DEFAULT_PAGE_SIZE: Listing page size (default: 24)
        DESIGNAUTO_CATALOG_MAX_PAGE_SIZE: Largest page a caller may request (default: 100)
        DESIGNAUTO_CATALOG_RELATED_LIMIT: Related groups returned by default (default: 8)
        DESIGNAUTO_CATALOG_PRIMARY_SWAP_ISOLATION: Isolation for primary-changing
            transactions (default: REPEATABLE READ)
        DESIGNAUTO_CATALOG_SERIALIZATION_RETRIES: Attempts before giving up on a
            serialization failure (default: 3)
    """

    model_config = SettingsConfigDict(
        env_prefix="DESIGNAUTO_CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_page_size: int = Field(
        default=24, ge=1, le=500, description="Default listing page size"
    )
    max_page_size: int = Field(
        default=100, ge=1, le=500, description="Largest allowed page size"
    )
    related_limit: int = Field(
        default=8, ge=1, le=100, description="Default number of related groups"
    )
    primary_swap_isolation: IsolationLevel = Field(
        default=IsolationLevel.REPEATABLE_READ,
        description="Isolation level for transactions that move the primary flag",
    )
    serialization_retries: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Attempts for a unit that hits a serialization failure",
    )

    @model_validator(mode="after")
    def validate_page_sizes(self) -> "CatalogSettings":
        """Validate default page size does not exceed the maximum."""
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) must be <= "
                f"max_page_size ({self.max_page_size})"
            )
        return self


class StorageSettings(BaseSettings):
    """Object storage settings for uploaded art images.

    The primary provider is required; the fallback provider is optional and
    only used when the primary fails.

    Environment variables:
        DESIGNAUTO_STORAGE_BASE_URL: Object storage REST endpoint
        DESIGNAUTO_STORAGE_SERVICE_KEY: Service key used for uploads
        DESIGNAUTO_STORAGE_BUCKET: Bucket name (default: designautoimages)
        DESIGNAUTO_STORAGE_PATH_PREFIX: Object key prefix (default: arts)
        DESIGNAUTO_STORAGE_FALLBACK_BASE_URL: Fallback provider endpoint
        DESIGNAUTO_STORAGE_FALLBACK_SERVICE_KEY: Fallback provider key
        DESIGNAUTO_STORAGE_FALLBACK_BUCKET: Fallback bucket name
        DESIGNAUTO_STORAGE_UPLOAD_TIMEOUT_SECONDS: Timeout per upload (default: 30)
        DESIGNAUTO_STORAGE_MAX_IMAGE_WIDTH: Widest stored image (default: 1200)
        DESIGNAUTO_STORAGE_WEBP_QUALITY: WebP encoder quality (default: 80)
        DESIGNAUTO_STORAGE_MAX_UPLOAD_BYTES: Largest accepted upload (default: 5MB)
    """

    model_config = SettingsConfigDict(
        env_prefix="DESIGNAUTO_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(
        default="http://localhost:54321", description="Object storage endpoint"
    )
    service_key: SecretStr = Field(
        default=SecretStr(""), description="Object storage service key"
    )
    bucket: str = Field(default="designautoimages", description="Bucket name")
    path_prefix: str = Field(default="arts", description="Object key prefix")
    fallback_base_url: str | None = Field(
        default=None, description="Fallback object storage endpoint"
    )
    fallback_service_key: SecretStr = Field(
        default=SecretStr(""), description="Fallback object storage service key"
    )
    fallback_bucket: str | None = Field(
        default=None, description="Fallback bucket name (defaults to bucket)"
    )
    upload_timeout_seconds: float = Field(
        default=30.0, gt=0, le=600, description="Timeout for a single upload"
    )
    max_image_width: int = Field(
        default=1200, ge=1, description="Uploads wider than this are downscaled"
    )
    webp_quality: int = Field(
        default=80, ge=1, le=100, description="Quality of the stored WebP image"
    )
    max_upload_bytes: int = Field(
        default=5 * 1024 * 1024,
        ge=1,
        description="Uploads larger than this are rejected before storage",
    )

    @field_validator("base_url", "fallback_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str | None) -> str | None:
        """Normalize endpoints so paths can be appended safely."""
        if value is None:
            return None
        return value.rstrip("/")

    @model_validator(mode="after")
    def validate_fallback(self) -> "StorageSettings":
        """Reject fallback credentials or bucket without a fallback endpoint."""
        if not self.fallback_base_url and (
            self.fallback_bucket or self.fallback_service_key.get_secret_value()
        ):
            raise ValueError(
                "fallback_bucket and fallback_service_key require fallback_base_url"
            )
        return self

    @property
    def has_fallback(self) -> bool:
        """Whether a fallback provider is configured."""
        return bool(self.fallback_base_url)


class OIDCSettings(BaseSettings):
    """OIDC bearer token validation settings.

    Environment variables:
        DESIGNAUTO_OIDC_ISSUER_URL: Issuer URL (realm URL for Keycloak)
        DESIGNAUTO_OIDC_AUDIENCE: Expected audience (defaults to client id)
        DESIGNAUTO_OIDC_CLIENT_ID: OAuth client id (default: designauto)
        DESIGNAUTO_OIDC_USER_ID_CLAIM: Claim holding the caller id (default: sub)
        DESIGNAUTO_OIDC_ROLE_CLAIM: Claim holding the marketplace role (default: role)
    """

    model_config = SettingsConfigDict(
        env_prefix="DESIGNAUTO_OIDC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    issuer_url: str = Field(
        default="http://localhost:8080/realms/designauto",
        description="OIDC issuer URL",
    )
    audience: str | None = Field(default=None, description="Expected audience")
    client_id: str = Field(default="designauto", description="OAuth client id")
    user_id_claim: str = Field(default="sub", description="Caller id claim")
    role_claim: str = Field(default="role", description="Marketplace role claim")

    @property
    def effective_audience(self) -> str:
        """Audience to validate, falling back to the client id."""
        return self.audience or self.client_id


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="DESIGNAUTO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(
        default="DesignAuto Catalog API", description="Application name"
    )
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Minimum log level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept only standard level names."""
        normalized = value.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return normalized

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def catalog(self) -> CatalogSettings:
        """Get catalog settings."""
        return get_catalog_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_catalog_settings() -> CatalogSettings:
    """Get cached catalog settings."""
    return CatalogSettings()


@lru_cache
def get_storage_settings() -> StorageSettings:
    """Get cached storage settings."""
    return StorageSettings()


@lru_cache
def get_oidc_settings() -> OIDCSettings:
    """Get cached OIDC settings."""
    return OIDCSettings()
