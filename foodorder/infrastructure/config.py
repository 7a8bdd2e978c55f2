"""Application configuration.

Loads settings from environment variables with sensible defaults.
Every variable is prefixed with ``FOODORDER_`` (e.g. ``FOODORDER_LOG_LEVEL``).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FOODORDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Pricing
    default_currency: str = "KRW"

    # Collaborators
    use_remote_clients: bool = False
    shop_api_url: str = "http://shop-api:8081"
    user_api_url: str = "http://user-api:8082"
    http_timeout_seconds: float = 5.0
    user_api_max_attempts: int = 2
    user_api_retry_delay_seconds: float = 0.1

    # Logging
    log_level: str = "INFO"


settings = Settings()
