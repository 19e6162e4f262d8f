"""Client Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - API key comes from the environment or an explicit argument (never hardcoded)
    - Settings are frozen once loaded: safe to share across concurrent operations
    - get_settings() is cached (lru_cache) — loaded once per process
    - Every controller receives its Settings explicitly; nothing reads them implicitly

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env support
    - Defaults provided for all non-secret settings
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings from environment variables (prefix STRIPE_)."""

    model_config = SettingsConfigDict(
        env_prefix="STRIPE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Credentials / endpoints
    api_key: str = Field(default="sk_test_placeholder", min_length=1)
    endpoint: str = "https://api.stripe.com"
    file_upload_endpoint: str = "https://uploads.stripe.com"
    api_version: str | None = None

    @field_validator("endpoint", "file_upload_endpoint")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # Retries
    max_retries: int = Field(default=3, ge=0, le=20)
    base_delay_ms: int = Field(default=500, ge=0)
    max_delay_ms: int = Field(default=20_000, ge=0)

    # Timeouts
    timeout_seconds: float = Field(default=80.0, gt=0)
    file_upload_chunk_timeout_seconds: float = Field(default=60.0, gt=0)

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
