"""
Application settings and configuration management.
"""

from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Server configuration (editor-state API)
    HOST: str = Field(default="127.0.0.1")
    PORT: int = Field(default=8000)
    DEBUG: bool = Field(default=False)

    # Application info
    APP_NAME: str = Field(default="Cell Editor")
    APP_VERSION: str = Field(default="1.0.0")

    # CORS configuration, comma-separated
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:5173")

    # Editing behavior
    FETCH_FORMULA_ERROR_DETAILS: bool = Field(default=True)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    LOG_FILE: Optional[str] = Field(default=None)
    LOG_ROTATION: bool = Field(default=True)
    LOG_MAX_SIZE: str = Field(default="10MB")
    LOG_BACKUP_COUNT: int = Field(default=5)

    # Development settings
    ENABLE_DOCS: bool = Field(default=True)

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Log level must be one of: {valid_levels}')
        return v.upper()

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from the comma-separated setting."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(',') if origin.strip()]

    def get_cors_config(self) -> dict:
        """Get CORS configuration dictionary."""
        return {
            "allow_origins": self.cors_origins,
            "allow_credentials": True,
            "allow_methods": ["GET", "DELETE", "OPTIONS"],
            "allow_headers": ["*"],
        }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
