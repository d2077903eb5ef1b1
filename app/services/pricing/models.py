"""Pricing models."""
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class OrderType(str, Enum):
    """How the order is fulfilled."""

    PICKUP = "pickup"
    DELIVERY = "delivery"


class LineItem(BaseModel):
    """One ordered menu item."""

    model_config = ConfigDict(frozen=True)

    name: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_price


class ChargeSettings(BaseModel):
    """Business rules applied to every order."""

    model_config = ConfigDict(frozen=True)

    gst_rate_percent: Decimal
    delivery_charge: Decimal
    service_charge: Decimal


class ChargeOverrides(BaseModel):
    """Per-order replacements for the configured charges.

    A field left as None falls back to the configured default.
    """

    model_config = ConfigDict(frozen=True)

    delivery_override: Optional[Decimal] = None
    service_override: Optional[Decimal] = None


class BreakdownLine(BaseModel):
    """Receipt line for a single item."""

    model_config = ConfigDict(frozen=True)

    name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class ChargesBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    delivery: Decimal
    service: Decimal


class TaxBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    gst_rate: Decimal
    gst_amount: Decimal


class OrderBreakdown(BaseModel):
    """Everything needed to print a receipt without recomputing."""

    model_config = ConfigDict(frozen=True)

    items: Tuple[BreakdownLine, ...]
    charges: ChargesBreakdown
    tax: TaxBreakdown


class OrderCalculationResult(BaseModel):
    """Derived monetary fields of an order."""

    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    gst_amount: Decimal
    delivery_charges: Decimal
    service_charges: Decimal
    total: Decimal
    breakdown: OrderBreakdown


class GSTBreakdown(BaseModel):
    """GST due on a single amount."""

    model_config = ConfigDict(frozen=True)

    gst_rate: Decimal
    gst_amount: Decimal
    total_with_gst: Decimal
