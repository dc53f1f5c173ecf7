# backend/courtside/routes/v1/bookings.py
"""
Booking routes - API v1

Versioned booking endpoints under /api/v1/bookings.
All business logic delegated to AvailabilityService and BookingService.

Endpoints:
    GET /all - Every booking (admin only)
    POST /check-availability - Combined court/equipment/coach availability
    POST / - Create a booking
    GET / - Current principal's bookings, newest first
    GET /{booking_id} - One booking (owner or admin)
    PUT /{booking_id}/cancel - Cancel a booking (owner)
"""

import asyncio
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies import (
    get_availability_service,
    get_booking_service,
    get_current_principal,
    require_admin,
)
from ...core.exceptions import DomainException
from ...models.booking import BookingStatus
from ...principal import Principal
from ...schemas.availability import AvailabilityCheckRequest, AvailabilityResult
from ...schemas.booking import BookingCreate, BookingResponse
from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["bookings-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    raise exc.to_http_exception() from exc


@router.get("/all", response_model=List[BookingResponse])
async def list_all_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    _: Principal = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    bookings = await asyncio.to_thread(
        booking_service.list_all_bookings,
        status=status_filter.value if status_filter else None,
        skip=skip,
        limit=limit,
    )
    return [BookingResponse.from_booking(b) for b in bookings]


@router.post("/check-availability", response_model=AvailabilityResult)
async def check_availability(
    request: AvailabilityCheckRequest,
    _: Principal = Depends(get_current_principal),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResult:
    """Itemized availability: sub-results are returned even when the answer is no."""
    try:
        return await asyncio.to_thread(
            availability_service.check_availability,
            request.court_id,
            request.start_time,
            request.end_time,
            request.equipment,
            request.coach_id,
            request.exclude_booking_id,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    principal: Principal = Depends(get_current_principal),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.create_booking, principal, booking_data)
        return BookingResponse.from_booking(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("", response_model=List[BookingResponse])
async def list_my_bookings(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    principal: Principal = Depends(get_current_principal),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    bookings = await asyncio.to_thread(
        booking_service.list_user_bookings, principal, skip=skip, limit=limit
    )
    return [BookingResponse.from_booking(b) for b in bookings]


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    principal: Principal = Depends(get_current_principal),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking, booking_id, principal)
        return BookingResponse.from_booking(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: str,
    principal: Principal = Depends(get_current_principal),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.cancel_booking, booking_id, principal)
        return BookingResponse.from_booking(booking)
    except DomainException as e:
        handle_domain_exception(e)
