"""Database-backed charge settings provider."""
import logging
from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import SiteSetting
from app.services.pricing.models import ChargeSettings
from app.services.pricing.money import Amount
from app.services.settings.base import ChargeSettingsProvider, merge_charge_settings

logger = logging.getLogger(__name__)

# site_settings key for each ChargeSettings field
SETTING_KEYS: Dict[str, str] = {
    "gst_rate_percent": "gst_rate",
    "delivery_charge": "delivery_charges",
    "service_charge": "service_charges",
}

SETTING_DESCRIPTIONS: Dict[str, str] = {
    "gst_rate": "GST rate as a percentage of the order subtotal",
    "delivery_charges": "Default delivery charge for delivery orders",
    "service_charges": "Default service charge added to every order",
}


class DatabaseChargeSettingsProvider(ChargeSettingsProvider):
    """Charge settings stored as rows of the site_settings table."""

    def __init__(self, db: AsyncSession, defaults: ChargeSettings):
        self.db = db
        self.defaults = defaults

    async def _load_rows(self) -> Dict[str, SiteSetting]:
        result = await self.db.execute(
            select(SiteSetting).where(SiteSetting.key.in_(SETTING_KEYS.values()))
        )
        return {row.key: row for row in result.scalars().all()}

    async def get_current_charge_settings(self) -> ChargeSettings:
        """Read the charge rows, falling back to defaults for missing keys."""
        rows = await self._load_rows()
        return merge_charge_settings(
            self.defaults,
            **{
                field: rows[key].value if key in rows else None
                for field, key in SETTING_KEYS.items()
            },
        )

    async def update_charge_settings(
        self,
        gst_rate_percent: Optional[Amount] = None,
        delivery_charge: Optional[Amount] = None,
        service_charge: Optional[Amount] = None,
    ) -> ChargeSettings:
        """Upsert the charge rows."""
        updated = merge_charge_settings(
            await self.get_current_charge_settings(),
            gst_rate_percent=gst_rate_percent,
            delivery_charge=delivery_charge,
            service_charge=service_charge,
        )

        rows = await self._load_rows()
        for field, key in SETTING_KEYS.items():
            value = str(getattr(updated, field))
            row = rows.get(key)
            if row is None:
                self.db.add(
                    SiteSetting(
                        key=key,
                        value=value,
                        type="number",
                        category="charges",
                        description=SETTING_DESCRIPTIONS[key],
                    )
                )
            else:
                row.value = value

        await self.db.commit()
        logger.info(
            f"Charge settings updated - GST: {updated.gst_rate_percent}%, "
            f"Delivery: {updated.delivery_charge}, Service: {updated.service_charge}"
        )
        return updated
