"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (defaults to SQLite for local dev, use PostgreSQL in production)
    database_url: str = "sqlite:///./formcraft.db"
    auto_create_tables: bool = True

    # Authentication
    secret_key: str = "dev-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Public links
    public_base_url: str = "http://localhost:5173"

    # File storage path (relative for local dev)
    upload_dir: str = "./storage/uploads"

    # Public form behaviour
    redirect_delay_seconds: float = 2.0
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 60
    geo_country_header: str = "cf-ipcountry"
    # Comma-separated peers whose X-Forwarded-For is believed
    trusted_proxies: str = ""

    # Analytics
    analytics_default_days: int = 30

    # SMTP (notifications are skipped when host or credentials are missing)
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    email_from: str = "FormCraft <no-reply@formcraft.app>"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True
    service_name: str = "formcraft-backend"

    # Debug mode
    debug: bool = False

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def trusted_proxies_list(self) -> List[str]:
        return [proxy.strip() for proxy in self.trusted_proxies.split(",") if proxy.strip()]

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_username and self.smtp_password)

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
