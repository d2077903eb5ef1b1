"""Order total calculation."""
import logging
from decimal import Decimal
from typing import Iterable, Optional, Union

from app.services.pricing.errors import ValidationError
from app.services.pricing.models import (
    BreakdownLine,
    ChargeOverrides,
    ChargeSettings,
    ChargesBreakdown,
    GSTBreakdown,
    LineItem,
    OrderBreakdown,
    OrderCalculationResult,
    OrderType,
    TaxBreakdown,
)
from app.services.pricing.money import ZERO, Amount, require_non_negative, round2
from app.services.settings.base import ChargeSettingsProvider

logger = logging.getLogger(__name__)


def validate_charge_settings(settings: ChargeSettings) -> ChargeSettings:
    """Reject negative rates or charges."""
    require_non_negative(settings.gst_rate_percent, "gst_rate_percent")
    require_non_negative(settings.delivery_charge, "delivery_charge")
    require_non_negative(settings.service_charge, "service_charge")
    return settings


def _coerce_order_type(order_type: Union[OrderType, str]) -> OrderType:
    try:
        return OrderType(order_type)
    except ValueError:
        raise ValidationError(
            "order_type", f"must be one of {[t.value for t in OrderType]} (got {order_type!r})"
        )


def _validate_items(items: Iterable[LineItem]) -> list[LineItem]:
    items = list(items)
    if not items:
        raise ValidationError("items", "order must contain at least one item")

    for index, item in enumerate(items):
        if isinstance(item.quantity, bool) or item.quantity <= 0:
            raise ValidationError(
                f"items[{index}].quantity",
                f"quantity for '{item.name}' must be a positive integer (got {item.quantity})",
            )
        require_non_negative(item.unit_price, f"items[{index}].unit_price")
    return items


def calculate_gst(amount: Amount, gst_rate_percent: Amount) -> Decimal:
    """GST on an amount, rounded to cents."""
    return round2(
        require_non_negative(amount, "amount")
        * require_non_negative(gst_rate_percent, "gst_rate_percent")
        / 100,
        "gst_amount",
    )


def calculate_order_total(
    items: Iterable[LineItem],
    order_type: Union[OrderType, str],
    settings: ChargeSettings,
    overrides: Optional[ChargeOverrides] = None,
) -> OrderCalculationResult:
    """
    Calculate subtotal, GST, charges and total for an order.

    GST is levied on the item subtotal only; delivery and service charges
    are added untaxed. Pickup orders never carry a delivery charge, even if
    an override is supplied.

    Args:
        items: Ordered line items (order is kept in the breakdown)
        order_type: pickup or delivery
        settings: Charge settings snapshot to apply
        overrides: Optional per-order delivery/service charge values

    Returns:
        OrderCalculationResult with a receipt breakdown

    Raises:
        ValidationError: If items, settings or overrides are malformed
    """
    order_type = _coerce_order_type(order_type)
    items = _validate_items(items)
    validate_charge_settings(settings)
    overrides = overrides or ChargeOverrides()

    subtotal = sum((item.line_total for item in items), Decimal("0"))

    if order_type == OrderType.DELIVERY:
        if overrides.delivery_override is not None:
            delivery = require_non_negative(overrides.delivery_override, "delivery_override")
        else:
            delivery = settings.delivery_charge
    else:
        delivery = ZERO

    if overrides.service_override is not None:
        service = require_non_negative(overrides.service_override, "service_override")
    else:
        service = settings.service_charge

    rounded_subtotal = round2(subtotal, "subtotal")
    gst_amount = calculate_gst(subtotal, settings.gst_rate_percent)
    subtotal = rounded_subtotal
    delivery = round2(delivery, "delivery_charges")
    service = round2(service, "service_charges")
    # Parts are whole cents, so this only enforces the upper limit
    total = round2(subtotal + gst_amount + delivery + service, "total")

    logger.debug(
        f"Calculated {order_type.value} order - Subtotal: {subtotal}, GST: {gst_amount}, "
        f"Delivery: {delivery}, Service: {service}, Total: {total}"
    )

    return OrderCalculationResult(
        subtotal=subtotal,
        gst_amount=gst_amount,
        delivery_charges=delivery,
        service_charges=service,
        total=total,
        breakdown=OrderBreakdown(
            items=tuple(
                BreakdownLine(
                    name=item.name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=round2(item.line_total, f"items[{index}].line_total"),
                )
                for index, item in enumerate(items)
            ),
            charges=ChargesBreakdown(delivery=delivery, service=service),
            tax=TaxBreakdown(gst_rate=settings.gst_rate_percent, gst_amount=gst_amount),
        ),
    )


def get_gst_breakdown(amount: Amount, settings: ChargeSettings) -> GSTBreakdown:
    """GST due on a standalone amount at the configured rate."""
    validate_charge_settings(settings)
    gst_amount = calculate_gst(amount, settings.gst_rate_percent)
    return GSTBreakdown(
        gst_rate=settings.gst_rate_percent,
        gst_amount=gst_amount,
        total_with_gst=round2(round2(amount) + gst_amount, "total_with_gst"),
    )


class OrderTotalCalculator:
    """Calculator bound to a charge settings provider.

    Settings are fetched from the provider on every call, so an admin
    change applies to the next order without a restart.
    """

    def __init__(self, settings_provider: ChargeSettingsProvider):
        self.settings_provider = settings_provider

    async def calculate(
        self,
        items: Iterable[LineItem],
        order_type: Union[OrderType, str],
        overrides: Optional[ChargeOverrides] = None,
    ) -> OrderCalculationResult:
        """Calculate an order total using the current charge settings."""
        settings = await self.settings_provider.get_current_charge_settings()
        return calculate_order_total(items, order_type, settings, overrides)

    async def gst_breakdown(self, amount: Amount) -> GSTBreakdown:
        """GST breakdown for an amount using the current rate."""
        settings = await self.settings_provider.get_current_charge_settings()
        return get_gst_breakdown(amount, settings)
