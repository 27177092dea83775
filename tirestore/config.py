"""Application configuration with environment variable validation."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tirestore.core.enums import StorageBackend

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    storage_backend: StorageBackend = Field(
        default=StorageBackend.MEMORY,
        validation_alias="STORAGE_BACKEND",
    )
    supabase_url: str = Field(default="", validation_alias="SUPABASE_URL")
    supabase_key: str = Field(default="", validation_alias="SUPABASE_KEY")

    # EPREL product pages
    eprel_base_url: str = Field(
        default="https://eprel.ec.europa.eu/screen/product/tyres",
        validation_alias="EPREL_BASE_URL",
    )
    catalog_timeout_seconds: float = Field(
        default=20.0, validation_alias="CATALOG_TIMEOUT_SECONDS"
    )
    catalog_cache_size: int = Field(default=1024, validation_alias="CATALOG_CACHE_SIZE")
    catalog_cache_ttl: int = Field(default=86400, validation_alias="CATALOG_CACHE_TTL")

    # Sessions: "token:owner,token2:owner2"
    api_tokens: str = Field(default="", validation_alias="API_TOKENS")

    # CORS
    allowed_origins: list[str] | str = Field(
        default=["*"],
        validation_alias="ALLOWED_ORIGINS",
    )

    # Rate limiting
    rate_limit_placement: str = Field(
        default="30/minute", validation_alias="RATE_LIMIT_PLACEMENT"
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @property
    def cors_origins(self) -> list[str]:
        """Parse ALLOWED_ORIGINS from comma-separated string or return list."""
        if isinstance(self.allowed_origins, str):
            return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return self.allowed_origins

    @property
    def token_owners(self) -> dict[str, str]:
        """Map each configured bearer token to its owner id."""
        owners: dict[str, str] = {}
        for pair in self.api_tokens.split(","):
            token, sep, owner = pair.strip().partition(":")
            if sep and token.strip() and owner.strip():
                owners[token.strip()] = owner.strip()
        return owners


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


def validate_settings(settings: Settings | None = None) -> None:
    """Validate that the selected storage backend is fully configured."""
    settings = settings or get_settings()
    errors = []

    if settings.storage_backend is StorageBackend.SUPABASE:
        if not settings.supabase_url:
            errors.append("SUPABASE_URL is required")
        if not settings.supabase_key:
            errors.append("SUPABASE_KEY is required")
    if settings.catalog_timeout_seconds <= 0:
        errors.append("CATALOG_TIMEOUT_SECONDS must be positive")

    if errors:
        raise ValueError(f"Configuration errors: {'; '.join(errors)}")
