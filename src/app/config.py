"""Application configuration with structured settings groups."""
import logging

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


# =============================================================================
# Nested Settings Models
# =============================================================================


class DatabaseOptions(BaseModel):
    """
    Database behaviour on startup.

    create_tables: Create missing tables at startup. Disable when the schema
        is managed by migrations on the hosted database.
    echo: Log every SQL statement (debugging only).
    """

    create_tables: bool = True
    echo: bool = False


class CorsSettings(BaseModel):
    """Browser clients allowed to call the API with credentials."""

    allowed_origins: list[str] = ["http://localhost:3000"]


class IdentityProviderConfig(BaseModel):
    """
    External auth API settings.

    url: Base URL of the GoTrue-compatible auth API, e.g. https://<project>.supabase.co/auth/v1
    api_key: Project API key sent as the ``apikey`` header.
    redirect_url: Where password-reset emails send the user back to.
    """

    url: str = "http://localhost:9999"
    api_key: str = ""
    redirect_url: str | None = None
    timeout_seconds: float = 10.0


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """
    Application settings with nested configuration groups.

    Environment variables use double underscore as delimiter for nested values.
    Example: IDENTITY_PROVIDER__URL=https://abc.supabase.co/auth/v1, DATABASE__CREATE_TABLES=false
    """

    # Application metadata
    app_name: str = "icangrow API"
    app_version: str = "1.0.0"
    environment: str = "development"
    log_level: str = "INFO"
    api_prefix: str = "/api/v1"

    # Database
    database_url: str = "postgresql+asyncpg://localhost/icangrow"

    # Nested settings groups
    database: DatabaseOptions = DatabaseOptions()
    cors: CorsSettings = CorsSettings()
    identity_provider: IdentityProviderConfig = IdentityProviderConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"
