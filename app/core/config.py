from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "QR Links"

    # Infrastructure Configs (Env Vars)
    DATABASE_URL: str = "sqlite:///./qrlinks.db"
    BASE_URL: str = "http://localhost:8080"

    # Redirect cache is optional; leave REDIS_HOST unset to run without it
    REDIS_HOST: Optional[str] = None
    REDIS_PORT: int = 6379
    CACHE_TTL: int = 86400

    SHORT_CODE_MAX_ATTEMPTS: int = 5

    # QR rendering defaults
    QR_MAX_VERSION: int = 40
    QR_DEFAULT_SIZE: int = 200
    QR_MAX_SIZE: int = 2000
    QR_DEFAULT_FOREGROUND: str = "#000000"
    QR_DEFAULT_BACKGROUND: str = "#ffffff"
    QR_DEFAULT_ERROR_CORRECTION: str = "M"
    LOGO_FETCH_TIMEOUT: float = 5.0

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
