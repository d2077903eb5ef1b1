"""Order placement and management endpoints."""
import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.auth import require_admin
from app.api.pricing import QuoteRequest, client_host, validation_http_error
from app.core.dependencies import get_order_calculator
from app.db.database import get_db
from app.services.persistence.orders import (
    OrderNotFoundError,
    OrderPersistenceService,
    OrderStateError,
)
from app.services.pricing.calculator import OrderTotalCalculator
from app.services.pricing.errors import ValidationError

router = APIRouter()
logger = logging.getLogger(__name__)


class PlaceOrderRequest(QuoteRequest):
    """Quote request plus customer details."""
    customer_name: str
    customer_phone: str
    delivery_address: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    status: str


class OrderItemResponse(BaseModel):
    """Order item response model."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    item_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderResponse(BaseModel):
    """Order response model."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    customer_name: str
    customer_phone: str
    delivery_address: Optional[str] = None
    order_type: str
    status: str
    subtotal: Decimal
    gst_rate: Decimal
    gst_amount: Decimal
    delivery_charges: Decimal
    service_charges: Decimal
    total_amount: Decimal
    created_at: datetime
    items: List[OrderItemResponse] = []


@router.post("/api/orders", response_model=OrderResponse, status_code=201)
async def place_order(
    order_req: PlaceOrderRequest,
    request: Request,
    calculator: OrderTotalCalculator = Depends(get_order_calculator),
    db: AsyncSession = Depends(get_db),
):
    """Price and store an order."""
    logger.info(
        f"[ORDERS] Place order - {len(order_req.items)} items, type: {order_req.order_type.value}, "
        f"Client: {client_host(request)}"
    )
    try:
        result = await calculator.calculate(
            order_req.items, order_req.order_type, order_req.overrides
        )
        order = await OrderPersistenceService(db).create_order(
            customer_name=order_req.customer_name,
            customer_phone=order_req.customer_phone,
            order_type=order_req.order_type,
            result=result,
            delivery_address=order_req.delivery_address,
        )
    except ValidationError as e:
        logger.info(f"[ORDERS] Rejected - {e}")
        raise validation_http_error(e)
    except Exception as e:
        logger.error(
            f"[ORDERS] Error placing order - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error placing order: {str(e)}")

    return OrderResponse.model_validate(order)


@router.get("/api/orders/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, db: AsyncSession = Depends(get_db)):
    """Get a single order with items."""
    try:
        order = await OrderPersistenceService(db).get_order_by_id(order_id)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(
            f"[ORDERS] Error fetching order {order_id} - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")
    return OrderResponse.model_validate(order)


@router.put("/api/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int,
    status_req: StatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
    _: bool = Depends(require_admin),
):
    """Move an order along its lifecycle."""
    logger.info(f"[ORDERS] Status update - order: {order_id}, status: {status_req.status}")
    try:
        order = await OrderPersistenceService(db).update_order_status(order_id, status_req.status)
    except ValidationError as e:
        raise validation_http_error(e)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OrderStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(
            f"[ORDERS] Error updating order {order_id} - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error updating order status: {str(e)}")
    return OrderResponse.model_validate(order)


@router.put("/api/orders/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: int, db: AsyncSession = Depends(get_db)):
    """Cancel an order before preparation starts."""
    logger.info(f"[ORDERS] Cancel requested - order: {order_id}")
    try:
        order = await OrderPersistenceService(db).cancel_order(order_id)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OrderStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(
            f"[ORDERS] Error cancelling order {order_id} - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error cancelling order: {str(e)}")
    return OrderResponse.model_validate(order)
