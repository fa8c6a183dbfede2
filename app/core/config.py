# app/core/config.py
import os
from pydantic_settings import BaseSettings
from pydantic import validator
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from .env"""

    # === Database ===
    DATABASE_URL: str = "sqlite+aiosqlite:///./kpi_dashboard.db"

    @validator("DATABASE_URL")
    def validate_database_url(cls, v):
        """Ensure database URL is safe for current environment"""
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env == "production" and "localhost" in v:
            raise ValueError("🚨 Production environment cannot use localhost database!")
        return v

    # === JWT ===
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    # === CORS ===
    ALLOWED_ORIGINS: List[str] = ["http://localhost:9002", "http://127.0.0.1:9002", "http://localhost:3000"]
    ALLOWED_METHODS: List[str] = ["*"]
    ALLOWED_HEADERS: List[str] = ["*"]

    # === File Upload ===
    MAX_IMPORT_FILE_SIZE: int = 5 * 1024 * 1024
    ALLOWED_IMPORT_EXTENSIONS: List[str] = [".json"]

    # === AI ===
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    AI_MODEL: str = "gpt-4o-mini"
    AI_TEMPERATURE: float = 0.4
    AI_TIMEOUT_SECONDS: float = 60.0

    # === System ===
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # === Security ===
    BCRYPT_ROUNDS: int = 12

    # === Bootstrap admin (created on startup when both are set) ===
    INITIAL_ADMIN_EMAIL: Optional[str] = None
    INITIAL_ADMIN_PASSWORD: Optional[str] = None
    INITIAL_ADMIN_NAME: str = "System Administrator"

    # === Organization defaults ===
    DEFAULT_ORG_NAME: str = "บริษัท ABC จำกัด (เริ่มต้น)"
    DEFAULT_PERIOD: str = "รายไตรมาส (Quarterly)"
    DEFAULT_CURRENCY: str = "thb"

    # === Business Rules ===
    MAX_TOTAL_WEIGHT: int = 100
    WRITE_ERROR_BUFFER_SIZE: int = 200

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Create a global settings instance
settings = Settings()
