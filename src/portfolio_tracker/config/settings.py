"""Application settings and configuration."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Shared Portfolio Tracker"
    app_version: str = "0.1.0"

    log_level: str = "INFO"

    # Provider credentials (absent = provider not configured)
    finnhub_api_key: Optional[str] = None
    alpha_vantage_api_key: Optional[str] = None
    fmp_api_key: Optional[str] = None

    # Quote resolution
    quote_cache_ttl_seconds: float = 300.0
    provider_timeout_seconds: float = 10.0
    provider_min_interval_seconds: float = 0.1
    rate_limit_backoff_seconds: float = 1.0

    # Connectivity probe
    connectivity_probe_url: str = "https://finnhub.io/api/v1/"
    connectivity_timeout_seconds: float = 3.0

    # Offline data; a fixed seed makes the simulated prices reproducible
    offline_seed: Optional[int] = None

    # Periodic price refresh
    refresh_enabled: bool = False
    refresh_interval_seconds: float = 30.0

    # Shared secrets for the two roles (not a security boundary)
    admin_password: str = "admin"
    viewer_password: str = "viewer"

    backend_port: int = 8001


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
