"""Configuration management using Pydantic Settings"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "credit-quoter"
    log_level: str = "INFO"

    # External Services
    lender_catalog_url: Optional[str] = None  # bank service base URL; built-in catalog when unset

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Pricing
    allowed_terms: List[int] = [12, 24, 36, 48, 60]


settings = Settings()
