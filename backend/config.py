"""
Configuration module for the model arena.
Loads environment variables and provides centralized config access.
"""

import os
from pathlib import Path
from typing import Dict, Optional
from pydantic_settings import BaseSettings
from functools import lru_cache

# ============================================================
# Centralized Paths
# ============================================================
PROJECT_ROOT = Path(__file__).parent.parent

# Static models catalogue (providers + models with pricing)
DEFAULT_CATALOG_PATH = PROJECT_ROOT / "models.json"

# Pre-built front-end assets
PUBLIC_DIR = PROJECT_ROOT / "public"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Uses pydantic-settings for validation and type coercion.
    """

    # ============================================================
    # Provider Credentials
    # ============================================================
    # Presence is reported by /api/config, values are never echoed.
    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None

    # ============================================================
    # Provider Endpoints
    # ============================================================
    anthropic_base_url: str = "https://api.anthropic.com"
    openai_base_url: str = "https://api.openai.com/v1"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # ============================================================
    # Provider Call Timeouts (seconds)
    # ============================================================
    # No read timeout by default: a stalled provider only stalls its
    # own model.  Set PROVIDER_READ_TIMEOUT to bound it.
    provider_connect_timeout: float = 30.0
    provider_read_timeout: Optional[float] = None

    # ============================================================
    # Models Catalogue
    # ============================================================
    models_catalog_path: Path = DEFAULT_CATALOG_PATH

    # ============================================================
    # Server Configuration
    # ============================================================
    host: str = "0.0.0.0"
    port: int = 3456
    debug: bool = False
    log_level: str = "INFO"

    # ============================================================
    # CORS Configuration
    # ============================================================
    # Comma-separated origins.  Empty disables CORS entirely since
    # the bundled front-end is served from the same origin.
    cors_origins: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse the comma-separated CORS origins."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def provider_credentials(self) -> Dict[str, Optional[str]]:
        """Map each credential's environment name to its configured value."""
        return {
            "ANTHROPIC_API_KEY": self.anthropic_api_key,
            "OPENAI_API_KEY": self.openai_api_key,
            "GEMINI_API_KEY": self.gemini_api_key,
        }

    def has_credential(self, env_key: str) -> bool:
        """True when the credential named ``env_key`` is set and non-empty.

        Unknown names fall back to the raw environment so catalogue
        entries can point at credentials this module does not model.
        """
        credentials = self.provider_credentials()
        if env_key in credentials:
            return bool(credentials[env_key])
        return bool(os.environ.get(env_key))


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to avoid reloading env vars on every call.
    """
    return Settings()
