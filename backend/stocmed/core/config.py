"""Application configuration"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./stocmed.db"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 30

    # Seed sample pharmacies on startup when the database is empty
    SEED_SAMPLE_DATA: bool = True

    # Geo
    EARTH_RADIUS_KM: float = 6371.0

    # Price bands shown to patients. Product decision, keep in sync with the UI.
    PRICE_BAND_SPREAD: str = "0.05"
    PRICE_BAND_STEP: int = 10

    # Inventory
    DEFAULT_LOW_STOCK_THRESHOLD: int = 10

    class Config:
        env_file = ".env"


settings = Settings()
