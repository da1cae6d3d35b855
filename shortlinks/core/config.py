"""Application configuration module.

This module contains settings for the link shortener service,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union
import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Set up basic logger for config module
logger = logging.getLogger(__name__)


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class StorageBackend(str, Enum):
    """Available link store implementations."""
    DATABASE = "database"
    MEMORY = "memory"
    REDIS = "redis"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with defaults.
    
    Settings are loaded from environment variables, with fallback to
    values in .env file if present, and finally to the default values
    specified here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Environment setting
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT
    
    # App Information
    APP_NAME: str = "Shortlinks"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Short-code allocation and resolution service"
    
    # API Configuration
    BASE_URL: str = "http://localhost:8000"  # Used for generating short URLs
    API_PREFIX: str = "/api"
    DEBUG: bool = False
    
    # CORS settings
    CORS_ORIGINS: Union[List[str], str] = ["*"]
    
    # Bearer tokens accepted on the /api link routes; empty means enforced upstream
    API_TOKENS: Union[List[str], str] = []
    
    # Short code configuration
    CODE_LENGTH: int = 6
    CUSTOM_CODE_MIN_LENGTH: int = 3
    CUSTOM_CODE_MAX_LENGTH: int = 32
    CODE_GENERATION_ATTEMPTS: int = 5
    
    # Per-operation deadline in seconds (None disables it)
    OPERATION_TIMEOUT_SECONDS: Optional[float] = 5.0
    
    # Storage
    STORAGE_BACKEND: StorageBackend = StorageBackend.DATABASE
    DATABASE_URL: str = "sqlite+aiosqlite:///./shortlinks.db"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 20
    DB_POOL_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 300
    
    # Redis settings
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_KEY_PREFIX: str = "shortlinks"
    
    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_FILE_ENABLED: bool = False
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{line} | {message}"
    LOG_JSON: bool = True
    
    # Validators
    @field_validator("OPERATION_TIMEOUT_SECONDS", mode="before")
    def validate_timeout(cls, v):
        """Convert empty string or non-positive values to None."""
        if v == "" or v is None:
            return None
        v = float(v)
        return v if v > 0 else None
    
    @field_validator("BASE_URL")
    def strip_base_url(cls, v: str) -> str:
        return v.rstrip("/")
    
    @field_validator("CORS_ORIGINS", "API_TOKENS")
    def validate_list_or_string(cls, v: Union[List[str], str]) -> List[str]:
        """Convert comma-separated string to list if needed."""
        if isinstance(v, str):
            # If it's an empty string, return an empty list
            if not v.strip():
                return []
            # If it's a single "*", keep it as a list with one element
            if v == "*":
                return ["*"]
            # Otherwise split by comma and strip whitespace
            return [item.strip() for item in v.split(",") if item.strip()]
        return v
    
    @model_validator(mode="after")
    def validate_code_policy(self) -> "Settings":
        if self.CUSTOM_CODE_MIN_LENGTH < 1:
            raise ValueError("CUSTOM_CODE_MIN_LENGTH must be at least 1")
        if self.CUSTOM_CODE_MIN_LENGTH > self.CUSTOM_CODE_MAX_LENGTH:
            raise ValueError("CUSTOM_CODE_MIN_LENGTH cannot exceed CUSTOM_CODE_MAX_LENGTH")
        if not self.CUSTOM_CODE_MIN_LENGTH <= self.CODE_LENGTH <= self.CUSTOM_CODE_MAX_LENGTH:
            raise ValueError("CODE_LENGTH must lie within the custom code length bounds")
        if self.CODE_GENERATION_ATTEMPTS < 1:
            raise ValueError("CODE_GENERATION_ATTEMPTS must be at least 1")
        if self.ENVIRONMENT == EnvironmentType.PRODUCTION and not self.API_TOKENS:
            logger.warning("No API_TOKENS configured; bearer authorization must be enforced upstream.")
        return self


# Create a singleton instance of the settings
settings = Settings()
