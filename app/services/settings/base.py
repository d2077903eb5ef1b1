"""Charge settings provider interface."""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from app.services.pricing.models import ChargeSettings
from app.services.pricing.money import Amount, require_non_negative

CHARGE_FIELDS = ("gst_rate_percent", "delivery_charge", "service_charge")


def merge_charge_settings(
    current: ChargeSettings,
    gst_rate_percent: Optional[Amount] = None,
    delivery_charge: Optional[Amount] = None,
    service_charge: Optional[Amount] = None,
) -> ChargeSettings:
    """Apply a partial update and validate the result.

    Fields left as None keep their current value. Every field of the
    result is checked, so this also validates a snapshot on its own.
    """
    changes = {
        "gst_rate_percent": gst_rate_percent,
        "delivery_charge": delivery_charge,
        "service_charge": service_charge,
    }
    values: dict[str, Decimal] = {}
    for field in CHARGE_FIELDS:
        value = changes[field]
        if value is None:
            value = getattr(current, field)
        values[field] = require_non_negative(value, field)
    return ChargeSettings(**values)


class ChargeSettingsProvider(ABC):
    """Source of the current GST rate and default charges.

    The provider is the only writer of charge settings; consumers must
    treat returned snapshots as read-only and ask again for each order.
    """

    @abstractmethod
    async def get_current_charge_settings(self) -> ChargeSettings:
        """Get the settings in force right now."""
        pass

    @abstractmethod
    async def update_charge_settings(
        self,
        gst_rate_percent: Optional[Amount] = None,
        delivery_charge: Optional[Amount] = None,
        service_charge: Optional[Amount] = None,
    ) -> ChargeSettings:
        """Change some or all settings and return the new snapshot."""
        pass
