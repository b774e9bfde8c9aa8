"""Application configuration management."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


# Session secret generated once per process when none is configured
_process_session_secret: Optional[str] = None


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_path: str = "/data/sessions.db"

    # Server
    public_url: str = "http://localhost:8080"
    log_level: str = "info"

    # Session
    session_secret_key: Optional[str] = None  # Random per process if not set
    session_cookie_name: str = "session"
    session_expire_days: int = 7
    session_cleanup_minutes: int = 30

    # Redirect targets
    login_url: str = "/login"
    register_url: str = "/register"
    products_url: str = "/products"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_session_secret() -> str:
    """Get the secret used to sign session cookies."""
    settings = get_settings()
    if settings.session_secret_key:
        return settings.session_secret_key

    # Sessions will not survive a restart without a configured secret
    global _process_session_secret
    if _process_session_secret is None:
        import secrets
        _process_session_secret = secrets.token_urlsafe(32)
    return _process_session_secret
