"""
Configuration Management

Centralized configuration using Pydantic Settings.
All settings loaded from environment variables (or .env) with sensible defaults.
"""
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.privy.io/api/v1"


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    # Ignore extra environment variables that aren't defined in the model
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============================================================
    # App credentials (Basic auth + privy-app-id header)
    # ============================================================
    privy_app_id: Optional[str] = Field(None, description="Privy application ID")
    privy_app_secret: Optional[str] = Field(None, description="Privy application secret")

    # ============================================================
    # Request signing
    # ============================================================
    privy_authorization_key: Optional[str] = Field(
        None,
        description="Authorization key(s), 'wallet-auth:...' format, comma-separated for several",
    )

    # ============================================================
    # Transport
    # ============================================================
    privy_api_url: str = Field(DEFAULT_API_URL, description="API base URL")
    privy_timeout: float = Field(30.0, description="Request timeout in seconds")

    @property
    def authorization_keys_list(self) -> List[str]:
        """Parse comma-separated authorization keys."""
        if not self.privy_authorization_key:
            return []
        return [key.strip() for key in self.privy_authorization_key.split(",") if key.strip()]


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get client settings (singleton).

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings():
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings
