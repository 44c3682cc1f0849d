"""
Centralized application configuration.

This module uses Pydantic's BaseSettings to load configuration from
environment variables and a .env file, providing a single, type-safe
source of truth for all settings.
"""

from typing import List
from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    # --- Core API Settings ---
    PROJECT_NAME: str = "MedTrack API"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    CORS_ORIGINS: List[str] = ["*"]

    # --- Database Settings ---
    DATABASE_URL: str = "sqlite:///./medtrack.db"

    # --- Session Token Settings ---
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # --- Caretaker Access Settings ---
    # When enabled, caretakers can only read patients explicitly assigned to them.
    ENFORCE_CARETAKER_ASSIGNMENTS: bool = False

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    # --- Pydantic Model Configuration ---
    class Config:
        """Loads settings from the specified .env file."""
        env_file = ".env"
        env_file_encoding = 'utf-8'


# Create a single, globally accessible settings instance
settings = Settings()
