"""Order quote and charge settings endpoints."""
import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from app.api.auth import require_admin
from app.core.config import settings
from app.core.dependencies import get_charge_settings_provider, get_order_calculator
from app.services.pricing.calculator import OrderTotalCalculator
from app.services.pricing.errors import ValidationError
from app.services.pricing.formatting import format_currency
from app.services.pricing.models import (
    ChargeOverrides,
    ChargeSettings,
    GSTBreakdown,
    LineItem,
    OrderCalculationResult,
    OrderType,
)
from app.services.settings.base import ChargeSettingsProvider

router = APIRouter()
logger = logging.getLogger(__name__)


class QuoteRequest(BaseModel):
    """Items and fulfilment details to price."""
    items: List[LineItem]
    order_type: OrderType
    delivery_override: Optional[Decimal] = None
    service_override: Optional[Decimal] = None

    @property
    def overrides(self) -> ChargeOverrides:
        return ChargeOverrides(
            delivery_override=self.delivery_override,
            service_override=self.service_override,
        )


class QuoteResponse(OrderCalculationResult):
    """Calculation result plus the total as display text."""
    formatted_total: str


class ChargeSettingsUpdate(BaseModel):
    """Partial update of the charge settings."""
    gst_rate_percent: Optional[Decimal] = None
    delivery_charge: Optional[Decimal] = None
    service_charge: Optional[Decimal] = None


def validation_http_error(error: ValidationError) -> HTTPException:
    """Map a pricing validation error to a 400 response."""
    return HTTPException(
        status_code=400,
        detail={"field": error.field, "message": error.message},
    )


def client_host(request: Request) -> str:
    return request.client.host if request.client else "unknown"


@router.post("/api/orders/quote", response_model=QuoteResponse)
async def quote_order(
    quote: QuoteRequest,
    request: Request,
    calculator: OrderTotalCalculator = Depends(get_order_calculator),
):
    """Price an order without placing it."""
    logger.info(
        f"[QUOTE] Request received - {len(quote.items)} items, type: {quote.order_type.value}, "
        f"Client: {client_host(request)}"
    )
    try:
        result = await calculator.calculate(quote.items, quote.order_type, quote.overrides)
        formatted_total = format_currency(
            result.total, symbol=settings.currency_symbol, locale=settings.currency_locale
        )
    except ValidationError as e:
        logger.info(f"[QUOTE] Rejected - {e}")
        raise validation_http_error(e)
    except Exception as e:
        logger.error(
            f"[QUOTE] Error calculating quote - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error calculating quote: {str(e)}")

    logger.info(f"[QUOTE] Calculated total {result.total}")
    return QuoteResponse(**result.model_dump(), formatted_total=formatted_total)


@router.get("/api/pricing/gst", response_model=GSTBreakdown)
async def gst_breakdown(
    amount: Decimal,
    calculator: OrderTotalCalculator = Depends(get_order_calculator),
):
    """GST due on an arbitrary amount at the current rate."""
    try:
        return await calculator.gst_breakdown(amount)
    except ValidationError as e:
        raise validation_http_error(e)
    except Exception as e:
        logger.error(
            f"[GST] Error calculating GST - amount: {amount}, Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error calculating GST: {str(e)}")


@router.get("/api/settings/charges", response_model=ChargeSettings)
async def get_charge_settings(
    provider: ChargeSettingsProvider = Depends(get_charge_settings_provider),
):
    """Current GST rate and default charges."""
    try:
        return await provider.get_current_charge_settings()
    except Exception as e:
        logger.error(
            f"[SETTINGS] Error reading charge settings - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error reading charge settings: {str(e)}")


@router.put("/api/settings/charges", response_model=ChargeSettings)
async def update_charge_settings(
    update: ChargeSettingsUpdate,
    request: Request,
    provider: ChargeSettingsProvider = Depends(get_charge_settings_provider),
    _: bool = Depends(require_admin),
):
    """Change the GST rate or default charges. Applies to the next order."""
    logger.info(
        f"[SETTINGS] Update requested - {update.model_dump(exclude_none=True)}, "
        f"Client: {client_host(request)}"
    )
    try:
        return await provider.update_charge_settings(
            gst_rate_percent=update.gst_rate_percent,
            delivery_charge=update.delivery_charge,
            service_charge=update.service_charge,
        )
    except ValidationError as e:
        logger.info(f"[SETTINGS] Rejected - {e}")
        raise validation_http_error(e)
    except Exception as e:
        logger.error(
            f"[SETTINGS] Error updating charge settings - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error updating charge settings: {str(e)}")
