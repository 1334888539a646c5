"""
Application Configuration — Environment & Settings
Centralizes all config from .env with Pydantic Settings for validation.
"""
from pathlib import Path
from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings

# Resolve paths relative to backend/ directory
BASE_DIR = Path(__file__).resolve().parent.parent

# Decimal places kept for stored major-unit amounts
AMOUNT_SCALE = 4

SQUARE_BASE_URLS = {
    "sandbox": "https://connect.squareupsandbox.com",
    "production": "https://connect.squareup.com",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # --- Core ---
    APP_NAME: str = "Tournament Payments API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # --- Database ---
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'data' / 'payments.db'}"

    # --- Square Gateway ---
    SQUARE_ACCESS_TOKEN: str = ""
    SQUARE_ENVIRONMENT: Literal["sandbox", "production"] = "sandbox"
    SQUARE_API_VERSION: str = "2024-10-17"
    SQUARE_LOCATION_ID: str = ""
    SQUARE_TIMEOUT_SECONDS: float = 30.0

    # --- Currency ---
    PAYMENT_CURRENCY: str = "GBP"
    # Divisor from minor units (pence, cents) to major units per currency
    CURRENCY_MINOR_UNITS: dict[str, int] = {
        "GBP": 100,
        "EUR": 100,
        "USD": 100,
        "CAD": 100,
        "AUD": 100,
        "JPY": 1,
        "KWD": 1000,
    }

    # --- Security ---
    CORS_ORIGINS: list[str] = ["*"]

    # --- Logging ---
    LOG_DIR: str = str(BASE_DIR / "logs")
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True

    @field_validator("CURRENCY_MINOR_UNITS")
    @classmethod
    def divisors_fit_amount_scale(cls, value: dict[str, int]) -> dict[str, int]:
        """Each divisor must be 10**n with n <= AMOUNT_SCALE, or stored amounts get rounded."""
        allowed = {10 ** places for places in range(AMOUNT_SCALE + 1)}
        for currency, divisor in value.items():
            if divisor not in allowed:
                raise ValueError(
                    f"Minor-unit divisor {divisor} for {currency} must be a power of ten "
                    f"up to {10 ** AMOUNT_SCALE}"
                )
        return {currency.upper(): divisor for currency, divisor in value.items()}

    @property
    def square_base_url(self) -> str:
        return SQUARE_BASE_URLS[self.SQUARE_ENVIRONMENT]


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
