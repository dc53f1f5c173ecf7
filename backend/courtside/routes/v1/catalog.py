# backend/courtside/routes/v1/catalog.py
"""
Catalog routes - API v1

Public read endpoints for courts, equipment and coaches.

Endpoints:
    GET /courts, GET /courts/{court_id}, GET /courts/{court_id}/schedule?date=
    GET /equipment, GET /equipment/{equipment_id}
    GET /coaches, GET /coaches/{coach_id}
"""

import asyncio
from datetime import date
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import get_catalog_service
from ...core.enums import CourtType, EquipmentCategory
from ...core.exceptions import DomainException
from ...schemas.booking import CourtSchedule
from ...schemas.resources import CoachResponse, CourtResponse, EquipmentResponse
from ...services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog-v1"])


@router.get("/courts", response_model=List[CourtResponse])
async def list_courts(
    active: Optional[bool] = Query(None),
    court_type: Optional[CourtType] = Query(None, alias="type"),
    sport: Optional[str] = Query(None),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> List[CourtResponse]:
    courts = await asyncio.to_thread(
        catalog_service.list_courts,
        active=active,
        court_type=court_type.value if court_type else None,
        sport=sport,
    )
    return [CourtResponse.model_validate(c) for c in courts]


@router.get("/courts/{court_id}", response_model=CourtResponse)
async def get_court(
    court_id: str, catalog_service: CatalogService = Depends(get_catalog_service)
) -> CourtResponse:
    try:
        court = await asyncio.to_thread(catalog_service.get_court, court_id)
        return CourtResponse.model_validate(court)
    except DomainException as e:
        raise e.to_http_exception() from e


@router.get("/courts/{court_id}/schedule", response_model=CourtSchedule)
async def get_court_schedule(
    court_id: str,
    day: date = Query(..., alias="date"),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> CourtSchedule:
    try:
        return await asyncio.to_thread(catalog_service.court_schedule, court_id, day)
    except DomainException as e:
        raise e.to_http_exception() from e


@router.get("/equipment", response_model=List[EquipmentResponse])
async def list_equipment(
    active: Optional[bool] = Query(None),
    category: Optional[EquipmentCategory] = Query(None),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> List[EquipmentResponse]:
    items = await asyncio.to_thread(
        catalog_service.list_equipment,
        active=active,
        category=category.value if category else None,
    )
    return [EquipmentResponse.model_validate(i) for i in items]


@router.get("/equipment/{equipment_id}", response_model=EquipmentResponse)
async def get_equipment(
    equipment_id: str, catalog_service: CatalogService = Depends(get_catalog_service)
) -> EquipmentResponse:
    try:
        item = await asyncio.to_thread(catalog_service.get_equipment, equipment_id)
        return EquipmentResponse.model_validate(item)
    except DomainException as e:
        raise e.to_http_exception() from e


@router.get("/coaches", response_model=List[CoachResponse])
async def list_coaches(
    active: Optional[bool] = Query(None),
    specialization: Optional[str] = Query(None),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> List[CoachResponse]:
    coaches = await asyncio.to_thread(
        catalog_service.list_coaches, active=active, specialization=specialization
    )
    return [CoachResponse.model_validate(c) for c in coaches]


@router.get("/coaches/{coach_id}", response_model=CoachResponse)
async def get_coach(
    coach_id: str, catalog_service: CatalogService = Depends(get_catalog_service)
) -> CoachResponse:
    try:
        coach = await asyncio.to_thread(catalog_service.get_coach, coach_id)
        return CoachResponse.model_validate(coach)
    except DomainException as e:
        raise e.to_http_exception() from e
