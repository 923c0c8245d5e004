from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Application
    PROJECT_NAME: str = "SkyLux Airlines Booking API"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Flight catalog seed
    CATALOG_START_DATE: Optional[date] = None  # Defaults to today
    CATALOG_DAYS: int = 30
    CATALOG_SEED: int = 2024

    # Booking policy
    STRICT_SEAT_ASSIGNMENT: bool = False
    CANCELLATION_REFUND_RATE: Decimal = Decimal("0.8")
    PNR_MAX_ATTEMPTS: int = 20

    # E-tickets
    ISSUE_ETICKETS: bool = True
    TICKETS_DIR: str = "static/tickets"
    ETICKET_FORMAT: str = "PDF"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

settings = Settings()
