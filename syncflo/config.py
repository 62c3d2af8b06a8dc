"""
Application Configuration Management

Loads configuration from environment variables (or a local .env file).
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with validation"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    environment: str = Field(default="development", description="Environment name")

    # Application
    app_name: str = Field(default="SyncFlo Backend")
    app_version: str = Field(default="1.0.0")
    log_level: str = Field(default="INFO")

    # FastAPI
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=10000, description="Render's default port")

    # Database
    database_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "DB_CONNECTION_STRING"),
        description="PostgreSQL connection string",
    )
    db_ssl: bool = Field(default=True)
    db_ssl_verify: bool = Field(
        default=False, description="Verify the database server certificate"
    )
    db_pool_size: int = Field(default=5)
    db_max_overflow: int = Field(default=10)
    db_pool_recycle: int = Field(default=1800, description="Seconds before a pooled connection is recycled")

    # Nango
    nango_secret_key: Optional[str] = Field(default=None, description="Nango secret API key")
    nango_base_url: str = Field(default="https://api.nango.dev")
    nango_timeout: float = Field(default=30.0, description="Nango API timeout in seconds")
    nango_verify_webhooks: bool = Field(
        default=False,
        description="Reject Nango webhooks without a valid X-Nango-Hmac-Sha256 header",
    )

    # CORS
    cors_origins: List[str] = Field(default=["*"])
    cors_allow_credentials: bool = Field(default=False)
    cors_allow_methods: List[str] = Field(default=["GET", "POST", "DELETE", "OPTIONS"])
    cors_allow_headers: List[str] = Field(default=["*"])

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment"""
        valid_envs = ["development", "staging", "production", "test"]
        v_lower = v.lower()
        if v_lower not in valid_envs:
            raise ValueError(f"Environment must be one of {valid_envs}")
        return v_lower

    @field_validator("database_url")
    @classmethod
    def normalize_database_url(cls, v: Optional[str]) -> Optional[str]:
        """
        Point plain PostgreSQL URLs at the asyncpg driver.

        Hosting providers hand out ``postgres://`` or ``postgresql://`` URLs;
        SQLAlchemy's async engine needs ``postgresql+asyncpg://``.
        """
        if not v:
            return v
        for prefix in ("postgres://", "postgresql://"):
            if v.startswith(prefix):
                return "postgresql+asyncpg://" + v[len(prefix):]
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.environment == "development"

    def validate_required_secrets(self) -> None:
        """
        Validate that required secrets are present.
        Raises ValueError if any required secrets are missing.
        """
        missing = []

        if not self.database_url:
            missing.append("database_url")
        if not self.nango_secret_key:
            missing.append("nango_secret_key")

        if missing:
            raise ValueError(
                f"Missing required configuration: {', '.join(missing)}. "
                f"Ensure the .env file or environment variables are configured."
            )


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    Loads from environment variables and the optional .env file.
    """
    settings = Settings()
    settings.validate_required_secrets()
    return settings


# Export singleton instance
settings = get_settings()
