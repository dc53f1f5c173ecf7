# backend/courtside/routes/v1/pricing.py
"""
Pricing routes - API v1

Endpoints:
    POST /estimate - Itemized price for a booking request
"""

import asyncio
import logging

from fastapi import APIRouter, Depends

from ...api.dependencies import get_pricing_service
from ...core.exceptions import DomainException
from ...schemas.pricing import PriceBreakdown, PriceEstimateRequest
from ...services.pricing_service import PricingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pricing-v1"])


@router.post("/estimate", response_model=PriceBreakdown)
async def estimate_price(
    request: PriceEstimateRequest,
    pricing_service: PricingService = Depends(get_pricing_service),
) -> PriceBreakdown:
    """Same breakdown that a booking created now would store."""
    try:
        return await asyncio.to_thread(
            pricing_service.calculate_price,
            request.court_id,
            request.start_time,
            request.end_time,
            request.equipment,
            request.coach_id,
        )
    except DomainException as e:
        raise e.to_http_exception() from e
