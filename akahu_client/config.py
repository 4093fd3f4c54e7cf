"""Configuration management using Pydantic Settings"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from akahu_client.utils.http_utils import DEFAULT_BASE_URL


class Settings(BaseSettings):
    """Client configuration loaded from AKAHU_* environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="AKAHU_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Akahu API
    base_url: str = DEFAULT_BASE_URL
    app_token: str | None = None
    app_secret: str | None = None  # only for app-scoped endpoints (connections)

    # Service
    service_name: str = "akahu-client"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = Field(10.0, gt=0)
    max_in_flight: int | None = Field(None, ge=1)  # no admission limit when unset


settings = Settings()
