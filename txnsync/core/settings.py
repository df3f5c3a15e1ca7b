"""Configuration and environment settings for the transaction list sync engine."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings for the sync engine and the development transaction server."""

    api_base_url: str = "http://127.0.0.1:8000"
    request_timeout_seconds: float = 10.0
    poll_interval_seconds: float = 2.0
    default_page_size: int = 20
    max_page_size: int = 100
    currency_symbol: str = "zł"
    uncategorized_key: str = "uncategorized"
    uncategorized_name: str = "Do kategoryzacji AI"
    log_level: str = "INFO"
    server_host: str = "127.0.0.1"
    server_port: int = 8000

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def get_settings() -> "Settings":
    """Return an instance of the application settings."""
    return Settings()
