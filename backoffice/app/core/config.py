"""
Configuration settings for the Travel Back Office.

This module handles application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Travel Back Office"
    debug: bool = False
    log_level: str = "INFO"

    # Backend API
    api_base_url: str = "http://localhost:8000/api"
    request_timeout: float = 20.0

    # Credentials (the admin token and the role the admin is acting as)
    admin_token: Optional[str] = None
    active_role_id: Optional[str] = None

    # Exports
    download_dir: str = "exports"

    # Business limits
    max_active_agents: int = 1000
    default_currency: str = "SAR"

    class Config:
        env_file = ".env"
        env_prefix = "BACKOFFICE_"
        case_sensitive = False


settings = Settings()
