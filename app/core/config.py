"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "jobboard_user"
    postgres_password: str = "password"
    postgres_db: str = "jobboard_db"
    # Full SQLAlchemy URL, overrides the postgres_* parts when set
    database_url: Optional[str] = None

    # MongoDB (server-side session store)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "jobboard_sessions"

    # Password hashing
    bcrypt_salt_rounds: int = 10

    # Sessions
    session_cookie_name: str = "sid"
    session_max_age_seconds: int = 86400
    session_cookie_secure: bool = False
    session_secret_key: str = "change-this-secret"

    # Object storage (MinIO / S3-compatible)
    storage_endpoint_url: Optional[str] = "http://localhost:9000"
    storage_access_key: str = "minioadmin"
    storage_secret_key: str = "minioadmin"
    storage_region: str = "us-east-1"
    registration_image_bucket: str = "registration-approval-images"
    storage_url_expire_seconds: int = 3 * 60 * 60

    # Google OAuth (employers)
    google_client_id: str = ""
    google_client_secret: str = ""
    google_redirect_uri: str = "http://localhost:8000/api/employers/auth/google/callback"

    # Frontend (OAuth redirects)
    frontend_url: str = "http://localhost"
    frontend_port: int = 5173

    # Admin approval endpoints
    admin_api_key: str = "change-this-admin-key"

    # App
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"
    log_level: str = "INFO"
    debug: bool = False

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def sqlalchemy_url(self) -> str:
        return self.database_url or self.postgres_url

    @property
    def frontend_base_url(self) -> str:
        return f"{self.frontend_url}:{self.frontend_port}"

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
