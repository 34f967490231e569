"""Storefront Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Kaos Euy Storefront"
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8001
    cors_origins: list[str] = ["*"]

    # Managed backend (REST + object storage)
    supabase_url: Optional[str] = None
    supabase_service_role_key: Optional[str] = None
    storage_bucket: str = "uploads"
    backend_timeout_seconds: float = 15.0

    # Admin back-office
    admin_password: Optional[str] = None

    # Notifications
    slack_webhook_url: Optional[str] = None

    # Rate limiting
    rate_limit_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def admin_configured(self) -> bool:
        """Check if an admin password is configured"""
        return bool(self.admin_password and self.admin_password.strip())

    def missing_required(self) -> list[str]:
        """Names of required settings that are unset or blank"""
        required = {
            "SUPABASE_URL": self.supabase_url,
            "SUPABASE_SERVICE_ROLE_KEY": self.supabase_service_role_key,
            "ADMIN_PASSWORD": self.admin_password,
        }
        return [name for name, value in required.items() if not value or not value.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
