"""Client Configuration — DIRECTORY_* environment variables via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DIRECTORY_", env_file=".env", case_sensitive=False, extra="ignore",
    )

    api_url: str = "http://localhost:5000"
    timeout_seconds: float = 10.0
    notification_seconds: float = 5.0


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
