import os
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Full SQLAlchemy URL, takes precedence over the DB_* parts below
    DATABASE_URL: Optional[str] = None

    # PostgreSQL connection parts (used when DB_HOST is set)
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_HOST: Optional[str] = None
    DB_PORT: str = "5432"
    DB_NAME: str = "schoolhub"
    DB_SSL_ROOT_CERT: Optional[str] = None

    # Connection pool
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    DB_ECHO: bool = False

    # JWT settings
    JWT_ACCESS_SECRET: str = "change-me-access"
    JWT_REFRESH_SECRET: str = "change-me-refresh"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30

    # Attachment storage
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"

    # HTTP server
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    CORS_ORIGINS: List[str] = ["*"]

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    # Collapse "User not found" / "Wrong password" into one login error
    LOGIN_GENERIC_ERRORS: bool = False

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.DB_HOST:
            return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        return "sqlite:///./schoolhub.db"

    class Config:
        # Look for env file in project root, even when running from subdirectories
        env_file = os.getenv("ENV_FILE") or str(Path(__file__).parent.parent.parent / "local.env")
        case_sensitive = False


settings = Settings()
