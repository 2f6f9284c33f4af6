"""
Application Configuration

Centralized configuration management using Pydantic settings.
Loads from environment variables with fallback to .env file.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Note: get_settings() is cached, so tests that need different values
    must set environment variables before the first import (or clear the cache).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    # Database settings
    DATABASE_URL: str = "postgresql://localhost/hrportal"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20

    # Security settings
    SECRET_KEY: str = "dev-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    # Sessions last 30 days; the client keeps the token in local storage
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30
    BCRYPT_ROUNDS: int = 12
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60

    # Application settings
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    BASE_URL: str = "http://localhost:3000"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Object storage (MinIO locally, S3 in production)
    STORAGE_ENDPOINT: str = "localhost:9000"
    STORAGE_ACCESS_KEY: str = "admin"
    STORAGE_SECRET_KEY: str = "change-me"
    STORAGE_SECURE: bool = False
    STORAGE_REGION: str = "us-east-1"
    # Public base for object URLs (e.g. a CloudFront domain); derived from endpoint if unset
    STORAGE_PUBLIC_URL: str = ""
    PRESIGNED_URL_EXPIRE_SECONDS: int = 60 * 60

    BUCKET_PROFILE_PHOTOS: str = "profile-photos"
    BUCKET_DOCUMENTS: str = "documents"
    BUCKET_PAYSLIPS: str = "payslips"
    BUCKET_LEAVE_ATTACHMENTS: str = "leave-attachments"

    # Language model behind the assistant procedures
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_BASE_URL: Optional[str] = None
    PORTAL_NAME: str = "202 Space"

    # Initial admin account created by the setup script
    ADMIN_EMAIL: str = "admin@company.com"
    ADMIN_PASSWORD: str = "ChangeMe123!"

    @property
    def storage_base_url(self) -> str:
        if self.STORAGE_PUBLIC_URL:
            return self.STORAGE_PUBLIC_URL.rstrip("/")
        scheme = "https" if self.STORAGE_SECURE else "http"
        return f"{scheme}://{self.STORAGE_ENDPOINT}"

    @property
    def buckets(self) -> List[str]:
        return [
            self.BUCKET_PROFILE_PHOTOS,
            self.BUCKET_DOCUMENTS,
            self.BUCKET_PAYSLIPS,
            self.BUCKET_LEAVE_ATTACHMENTS,
        ]


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only instantiate settings once.
    """
    return Settings()
