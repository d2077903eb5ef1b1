"""Application configuration."""
from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./orders.db"

    # Restaurant
    restaurant_name: str = "Restaurant"

    # Admin dashboard
    dashboard_password: str = "changeme"

    # Default charges (used to seed whichever charge settings backend is active)
    gst_rate_percent: Decimal = Decimal("18")
    delivery_charge: Decimal = Decimal("50")
    service_charge: Decimal = Decimal("0")

    # Charge settings backend: static (env defaults), yaml file, or database
    charge_settings_backend: Literal["static", "yaml", "database"] = "static"
    charge_settings_file: str = "charge_settings.yaml"

    # Display
    currency_symbol: str = "₹"
    currency_locale: str = "en-IN"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
