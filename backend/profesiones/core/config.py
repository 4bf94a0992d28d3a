# profesiones/core/config.py
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # MongoDB
    MONGO_URL: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "profesionesuy"
    MONGO_TIMEOUT_MS: int = 5000

    # Auth
    JWT_SECRET_KEY: str = "profesiones-dev-secret-change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24
    RESET_TOKEN_EXPIRE_MINUTES: int = 60

    # Scheduling
    SLOT_MINUTES: int = 30
    ALLOW_PAST_DATES: bool = False
    TIMEZONE: str = "America/Montevideo"

    # Email
    FRONTEND_URL: str = "http://localhost:8081"
    SMTP_SERVER: Optional[str] = None
    SMTP_PORT: int = 465
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_TIMEOUT: int = 10

    # HTTP
    CORS_ORIGINS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None


settings = Settings()
