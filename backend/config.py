# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./business_dashboard.db"

    # External identity / session service
    USERS_SERVICE_API_URL: str = "http://localhost:8787"
    USERS_SERVICE_API_KEY: str = ""

    SESSION_COOKIE_NAME: str = "session_token"
    SESSION_MAX_AGE_DAYS: int = 60

    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
