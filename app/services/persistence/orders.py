"""Order persistence service."""
import logging
import random
import time
from decimal import Decimal
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.models import PRICE_SCALE, Order, OrderItem
from app.services.pricing.errors import ValidationError
from app.services.pricing.models import OrderCalculationResult, OrderType

logger = logging.getLogger(__name__)

ORDER_STATUSES = (
    "pending",
    "confirmed",
    "preparing",
    "out_for_delivery",
    "delivered",
    "cancelled",
)
TERMINAL_STATUSES = ("delivered", "cancelled")
CANCELLABLE_STATUSES = ("pending", "confirmed")

# Smallest step the unit_price and gst_rate columns hold
STORED_STEP = Decimal(1).scaleb(-PRICE_SCALE)
MAX_STORED_RATE = Decimal("999.9999")


class OrderNotFoundError(LookupError):
    """Raised when an order id does not exist."""

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class OrderStateError(ValueError):
    """Raised for a status change the order's current status does not allow."""


def require_storable(value: Decimal, field: str, limit: Optional[Decimal] = None) -> Decimal:
    """Reject prices or rates the order tables would have to round or truncate."""
    if value != value.quantize(STORED_STEP):
        raise ValidationError(
            field, f"more than {PRICE_SCALE} decimal places cannot be stored (got {value})"
        )
    if limit is not None and value > limit:
        raise ValidationError(field, f"must not exceed {limit} (got {value})")
    return value


def generate_order_number() -> str:
    """Order number in the form ORD-<epoch millis>-<0..999>."""
    return f"ORD-{int(time.time() * 1000)}-{random.randint(0, 999)}"


class OrderPersistenceService:
    """Service for persisting orders priced by the order total calculator."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_order(
        self,
        customer_name: str,
        customer_phone: str,
        order_type: Union[OrderType, str],
        result: OrderCalculationResult,
        delivery_address: Optional[str] = None,
    ) -> Order:
        """
        Create an order and its items from a calculation result.

        Args:
            customer_name: Name for the order
            customer_phone: Contact number
            order_type: pickup or delivery
            result: Totals and breakdown from the calculator
            delivery_address: Required for delivery orders

        Returns:
            The stored Order with items loaded
        """
        order_type = OrderType(order_type)
        if order_type == OrderType.DELIVERY and not (delivery_address or "").strip():
            raise ValidationError("delivery_address", "delivery orders need an address")

        require_storable(result.breakdown.tax.gst_rate, "gst_rate", MAX_STORED_RATE)
        for index, line in enumerate(result.breakdown.items):
            require_storable(line.unit_price, f"items[{index}].unit_price")

        order = Order(
            order_number=generate_order_number(),
            customer_name=customer_name,
            customer_phone=customer_phone,
            delivery_address=delivery_address,
            order_type=order_type.value,
            status="pending",
            subtotal=result.subtotal,
            gst_rate=result.breakdown.tax.gst_rate,
            gst_amount=result.gst_amount,
            delivery_charges=result.delivery_charges,
            service_charges=result.service_charges,
            total_amount=result.total,
            items=[
                OrderItem(
                    item_name=line.name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                )
                for line in result.breakdown.items
            ],
        )
        self.db.add(order)
        await self.db.commit()
        logger.info(f"Created order {order.order_number} - total {result.total}")
        return await self.get_order_by_id(order.id)

    async def get_order_by_id(self, order_id: int) -> Order:
        """Get order by ID with items."""
        result = await self.db.execute(
            select(Order)
            .where(Order.id == order_id)
            .options(selectinload(Order.items))
            .execution_options(populate_existing=True)
        )
        order = result.scalar_one_or_none()
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def update_order_status(self, order_id: int, status: str) -> Order:
        """Move an order to a new status. Delivered and cancelled orders are final."""
        if status not in ORDER_STATUSES:
            raise ValidationError("status", f"must be one of {list(ORDER_STATUSES)} (got {status!r})")

        order = await self.get_order_by_id(order_id)
        if order.status in TERMINAL_STATUSES:
            raise OrderStateError(f"Cannot update status. Order is already {order.status}")

        order.status = status
        await self.db.commit()
        logger.info(f"Order {order.order_number} status -> {status}")
        return await self.get_order_by_id(order_id)

    async def cancel_order(self, order_id: int) -> Order:
        """Cancel an order that has not started preparation."""
        order = await self.get_order_by_id(order_id)
        if order.status not in CANCELLABLE_STATUSES:
            raise OrderStateError("Order cannot be cancelled at this stage")

        order.status = "cancelled"
        await self.db.commit()
        logger.info(f"Order {order.order_number} cancelled")
        return await self.get_order_by_id(order_id)
