"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting has a default: the service starts with no environment at all
    - get_settings() is cached (lru_cache) — single instance per process
    - 5xx error detail is exposed only when environment == "development"
"""

from functools import lru_cache
from urllib.parse import urlsplit

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE = "mern_crud"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    environment: str = "development"
    max_body_bytes: int = 10 * 1024 * 1024
    shutdown_timeout_seconds: int = 10

    # Client origin allowed by CORS
    client_url: str = "http://localhost:3000"

    # Document store
    mongodb_uri: str = f"mongodb://localhost:27017/{DEFAULT_DATABASE}"
    mongodb_database: str | None = None
    mongodb_timeout_ms: int = 5000

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() == "development"

    @property
    def cors_origins(self) -> list[str]:
        return [self.client_url.rstrip("/")]

    @property
    def database_name(self) -> str:
        """Explicit MONGODB_DATABASE, else the database named in the URI path."""
        if self.mongodb_database:
            return self.mongodb_database
        path = urlsplit(self.mongodb_uri).path.lstrip("/")
        return path or DEFAULT_DATABASE


@lru_cache
def get_settings() -> Settings:
    return Settings()
