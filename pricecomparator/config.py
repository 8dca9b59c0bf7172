"""Application configuration via Pydantic Settings."""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Fixed exchange rates into RON
    EUR_TO_RON: Decimal = Decimal("5.0")
    USD_TO_RON: Decimal = Decimal("4.6")

    # Basket evaluation
    BASKET_MAX_WORKERS: int = 4  # 1 disables the thread pool

    # Discount analytics
    NEW_DISCOUNT_WINDOW_DAYS: int = 1  # today plus this many previous days

    # Database catalog adapter
    DATABASE_URL: str = "sqlite:///./pricecomparator.db"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False


settings = Settings()
