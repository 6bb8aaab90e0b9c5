"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - The store connection string and listening port come from the environment
    - get_settings() is cached (lru_cache): single instance per process
    - api_prefix is empty or starts with "/", and never ends with "/"

Design Decisions:
    - Defaults provided for every setting: works against a local mongod out of the box
    - error_mode defaults to compat: legacy 200 bodies unless ERROR_MODE=strict
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from user_api.core.domain_types import ErrorMode


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Document store
    mongodb_uri: str = "mongodb://localhost:27017/users"
    mongodb_database: str | None = None
    mongodb_collection: str = "users"
    mongodb_max_pool_size: int = 100
    mongodb_server_selection_timeout_ms: int = 5000

    # Server
    host: str = "0.0.0.0"
    port: int = 9000

    # API surface
    api_prefix: str = "/api"
    docs_path: str = "/api-doc"
    api_title: str = "User API"
    api_version: str = "1.0.0"
    public_url: str = "http://localhost:9000"
    error_mode: ErrorMode = ErrorMode.COMPAT
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("api_prefix", "docs_path", mode="before")
    @classmethod
    def normalize_path(cls, v: str) -> str:
        """'api/' and '/api/' both become '/api'; '/' becomes ''."""
        if isinstance(v, str):
            v = v.strip().strip("/")
            return f"/{v}" if v else ""
        return v

    @field_validator("error_mode", mode="before")
    @classmethod
    def lowercase_error_mode(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
