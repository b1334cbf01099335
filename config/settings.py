"""Configuration management using pydantic-settings."""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Upstream analytics service (prediction jobs, reference data)
    analytics_api_url: str = "http://localhost:5000/api"

    # None leaves requests to its default (wait until the upstream answers)
    analytics_timeout_seconds: Optional[float] = None

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
