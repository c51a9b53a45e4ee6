"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (e.g. SECRET_KEY) are validated at
load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except secret_key, which is
    validated in validate_required.
    """

    # App
    app_name: str = "center-authz"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    log_format: str = "text"

    # Database (SQLAlchemy async, e.g. postgresql+asyncpg://...). Empty disables SQL.
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int = 20
    db_max_overflow: int = 30
    db_command_timeout: int = 60

    # Security
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Redis Cache
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    cache_ttl_permissions: int = 300

    # Permission snapshot: seconds between background reloads (0 = reload only after admin writes)
    permission_snapshot_refresh_seconds: int = 60

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required secrets and non-negative intervals."""
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.cache_ttl_permissions < 0:
            raise ValueError("CACHE_TTL_PERMISSIONS must be >= 0")
        if self.permission_snapshot_refresh_seconds < 0:
            raise ValueError("PERMISSION_SNAPSHOT_REFRESH_SECONDS must be >= 0")
        if self.log_format not in ("text", "json"):
            raise ValueError(
                f"LOG_FORMAT must be 'text' or 'json', got: {self.log_format!r}"
            )
        return self

    @property
    def cors_origins(self) -> list[str]:
        """allowed_origins split on commas (empty entries dropped)."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
