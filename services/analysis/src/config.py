"""Service configuration using Pydantic BaseSettings.

This module provides centralized configuration management for the Analysis Service.
All environment variables are validated at startup.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_WORKSPACE_ENV = Path(__file__).resolve().parent.parent.parent.parent / ".env"
_DATA_DIR = Path(__file__).resolve().parent / "data"


class ServiceConfig(BaseSettings):
    """Configuration for Analysis Service.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=str(_WORKSPACE_ENV),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Service identity
    service_name: str = "analysis"
    http_host: str = "0.0.0.0"
    http_port: int = 8080

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # Alpha Vantage (live overview + quote). The "demo" key only serves
    # Alpha Vantage's sample symbols; everything else falls back to baseline.
    alpha_vantage_api_key: str = "demo"
    alpha_vantage_base_url: str = "https://www.alphavantage.co/query"
    alpha_vantage_timeout: float = 15.0

    # Claude API key (model and temperature are configured in prompts/*.yaml)
    anthropic_api_key: str = ""

    # Presentation delay for the cosmetic stages; 0 completes them immediately
    stage_delay_seconds: float = 0.3

    # Reference data
    profiles_path: Path = _DATA_DIR / "profiles.yaml"
    dashboard_path: Path = _DATA_DIR / "dashboard.yaml"


# Global config instance - validated at import time
config = ServiceConfig()
