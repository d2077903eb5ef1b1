"""In-memory charge settings provider."""
from typing import Optional

from app.services.pricing.models import ChargeSettings
from app.services.pricing.money import Amount
from app.services.settings.base import ChargeSettingsProvider, merge_charge_settings


class StaticChargeSettingsProvider(ChargeSettingsProvider):
    """Keeps charge settings in process memory, seeded from configuration."""

    def __init__(self, initial: ChargeSettings):
        self._settings = merge_charge_settings(initial)

    async def get_current_charge_settings(self) -> ChargeSettings:
        """Get the current snapshot."""
        return self._settings

    async def update_charge_settings(
        self,
        gst_rate_percent: Optional[Amount] = None,
        delivery_charge: Optional[Amount] = None,
        service_charge: Optional[Amount] = None,
    ) -> ChargeSettings:
        """Swap in a new snapshot. Snapshots already handed out are untouched."""
        self._settings = merge_charge_settings(
            self._settings,
            gst_rate_percent=gst_rate_percent,
            delivery_charge=delivery_charge,
            service_charge=service_charge,
        )
        return self._settings
