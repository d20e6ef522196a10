"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (DATABASE_URL, SECRET_KEY) are
validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "taskboard"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (Postgres via asyncpg; schema managed by Alembic)
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Security: JWTs are minted by the identity provider and verified here.
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Approval links: <public_base_url>/approve/<token>
    public_base_url: str = "http://localhost:8080"
    approval_request_ttl_days: int = 7

    # Reject status jumps outside the allowed-transition table (off = any status may be set).
    enforce_status_transitions: bool = False

    # User provisioning collaborator (invite function)
    provisioning_url: str | None = None
    provisioning_timeout_seconds: float = 15.0

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"

    # Redis cache and change notifications
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    cache_ttl_permissions: int = 300

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
        """Validate required env (SECRET_KEY) and sane approval TTL.

        DATABASE_URL is checked lazily by the persistence layer so the app
        can start (and serve /health) without a database.
        """
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Use the signing secret of the identity "
                "provider that issues access tokens."
            )
        if self.approval_request_ttl_days < 1:
            raise ValueError("APPROVAL_REQUEST_TTL_DAYS must be at least 1")
        if self.telemetry_exporter not in ("console", "otlp", "none"):
            raise ValueError(
                f"Invalid telemetry_exporter '{self.telemetry_exporter}'. "
                "Must be one of: 'console', 'otlp', 'none'"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.
    """
    return Settings()
