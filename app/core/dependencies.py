"""FastAPI dependencies."""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.database import get_db
from app.services.pricing.calculator import OrderTotalCalculator
from app.services.pricing.models import ChargeSettings
from app.services.settings.base import ChargeSettingsProvider
from app.services.settings.database import DatabaseChargeSettingsProvider
from app.services.settings.static import StaticChargeSettingsProvider
from app.services.settings.yaml_file import YamlChargeSettingsProvider


def default_charge_settings() -> ChargeSettings:
    """Charge settings from application config."""
    return ChargeSettings(
        gst_rate_percent=settings.gst_rate_percent,
        delivery_charge=settings.delivery_charge,
        service_charge=settings.service_charge,
    )


# Shared across requests so admin updates are visible to every caller
_static_provider = StaticChargeSettingsProvider(default_charge_settings())


def get_charge_settings_provider(
    db: AsyncSession = Depends(get_db),
) -> ChargeSettingsProvider:
    """Get the configured charge settings provider."""
    backend = settings.charge_settings_backend
    if backend == "database":
        return DatabaseChargeSettingsProvider(db, defaults=default_charge_settings())
    if backend == "yaml":
        return YamlChargeSettingsProvider(
            settings.charge_settings_file, defaults=default_charge_settings()
        )
    return _static_provider


def get_order_calculator(
    provider: ChargeSettingsProvider = Depends(get_charge_settings_provider),
) -> OrderTotalCalculator:
    """Get an order total calculator bound to the active settings provider."""
    return OrderTotalCalculator(settings_provider=provider)
