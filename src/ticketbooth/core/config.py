"""
Application configuration using Pydantic Settings
"""
from pathlib import Path
from typing import List, Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def find_env_file() -> Optional[str]:
    """Search for .env file in common locations"""
    locations = [
        Path.cwd() / '.env',
        Path(__file__).resolve().parent.parent.parent.parent / '.env',  # Project root
    ]

    for loc in locations:
        if loc.exists():
            return str(loc)
    return None


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=find_env_file(),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra='ignore',
    )

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://localhost/ticketbooth"
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 40

    # Application
    APP_NAME: str = "TicketBooth Booking Engine"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Booking
    MAX_TICKETS_PER_BOOKING: int = 20

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    LOG_FILE: Optional[str] = None
    SERVICE_NAME: str = "ticketbooth"
    ENVIRONMENT: str = "development"

    # CORS
    CORS_ORIGINS: Union[List[str], str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v


# Global settings instance
settings = Settings()
