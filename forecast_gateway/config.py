"""Configuration management using Pydantic Settings"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Upstream bank data provider (Nessie-style REST API)
    bank_api_base: str = "http://localhost:8001"
    bank_api_key: str = ""
    bank_mode: Literal["customer", "enterprise"] = "customer"

    # Service
    service_name: str = "forecast-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0
    bank_max_retries: int = 3
    bank_backoff_base: float = 0.5  # Exponential backoff base in seconds

    # Forecast defaults
    default_horizon_days: int = 30
    fallback_starting_balance: float = 1000.0  # Used when the provider reports no usable balance


settings = Settings()
