"""YAML file charge settings provider."""
import logging
from pathlib import Path
from typing import Optional

import yaml

from app.services.pricing.errors import ValidationError
from app.services.pricing.models import ChargeSettings
from app.services.pricing.money import Amount
from app.services.settings.base import (
    CHARGE_FIELDS,
    ChargeSettingsProvider,
    merge_charge_settings,
)

logger = logging.getLogger(__name__)


class YamlChargeSettingsProvider(ChargeSettingsProvider):
    """Charge settings stored in a YAML file.

    The file is read on every call so hand edits apply to the next order.
    Keys missing from the file fall back to the defaults.
    """

    def __init__(self, settings_file: str, defaults: ChargeSettings):
        self.settings_file = Path(settings_file)
        self.defaults = defaults

    def _read(self) -> ChargeSettings:
        if not self.settings_file.exists():
            return merge_charge_settings(self.defaults)

        with open(self.settings_file, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValidationError(
                "charge_settings_file", f"{self.settings_file} must contain a mapping"
            )
        return merge_charge_settings(
            self.defaults, **{field: data.get(field) for field in CHARGE_FIELDS}
        )

    def _write(self, settings: ChargeSettings) -> None:
        data = {field: str(getattr(settings, field)) for field in CHARGE_FIELDS}
        self.settings_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.settings_file, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    async def get_current_charge_settings(self) -> ChargeSettings:
        """Read the settings file."""
        return self._read()

    async def update_charge_settings(
        self,
        gst_rate_percent: Optional[Amount] = None,
        delivery_charge: Optional[Amount] = None,
        service_charge: Optional[Amount] = None,
    ) -> ChargeSettings:
        """Merge changes into the file and write it back."""
        updated = merge_charge_settings(
            self._read(),
            gst_rate_percent=gst_rate_percent,
            delivery_charge=delivery_charge,
            service_charge=service_charge,
        )
        self._write(updated)
        logger.info(f"Charge settings written to {self.settings_file}")
        return updated
