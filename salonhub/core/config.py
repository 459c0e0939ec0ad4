from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "SalonHub API"
    API_V1_STR: str = "/api/v1"
    DATABASE_URL: str = "sqlite:///./salonhub.db"
    LOG_LEVEL: str = "INFO"

    # Token signing
    SECRET_KEY: str = "your-secret-key-here-change-in-production"
    REFRESH_SECRET_KEY: str = "your-refresh-secret-key-here-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Listing / search defaults
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    DEFAULT_NEARBY_RADIUS_KM: float = 5.0
    CURRENCY_SYMBOL: str = "₹"

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
