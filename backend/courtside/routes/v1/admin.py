# backend/courtside/routes/v1/admin.py
"""
Admin routes - API v1

Every endpoint requires the admin role.

Endpoints:
    GET /pricing-rules - All rules, highest priority first
    POST /pricing-rules - Create a rule
    PUT /pricing-rules/{rule_id} - Partial update
    DELETE /pricing-rules/{rule_id} - Delete a rule
    PATCH /courts/{court_id}/toggle - Flip court activation
    PATCH /equipment/{equipment_id}/toggle - Flip equipment activation
    PATCH /coaches/{coach_id}/toggle - Flip coach activation
    PATCH /equipment/{equipment_id} - Edit equipment stock or price
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from ...api.dependencies import get_admin_service, require_admin
from ...core.exceptions import DomainException
from ...schemas.resources import (
    CoachResponse,
    CourtResponse,
    EquipmentResponse,
    EquipmentStockUpdate,
    PricingRuleCreate,
    PricingRuleResponse,
    PricingRuleUpdate,
)
from ...services.admin_service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-v1"], dependencies=[Depends(require_admin)])


@router.get("/pricing-rules", response_model=List[PricingRuleResponse])
async def list_pricing_rules(
    admin_service: AdminService = Depends(get_admin_service),
) -> List[PricingRuleResponse]:
    rules = await asyncio.to_thread(admin_service.list_rules)
    return [PricingRuleResponse.model_validate(r) for r in rules]


@router.post(
    "/pricing-rules", response_model=PricingRuleResponse, status_code=status.HTTP_201_CREATED
)
async def create_pricing_rule(
    data: PricingRuleCreate, admin_service: AdminService = Depends(get_admin_service)
) -> PricingRuleResponse:
    try:
        rule = await asyncio.to_thread(admin_service.create_rule, data)
        return PricingRuleResponse.model_validate(rule)
    except DomainException as e:
        raise e.to_http_exception() from e


@router.put("/pricing-rules/{rule_id}", response_model=PricingRuleResponse)
async def update_pricing_rule(
    rule_id: str,
    data: PricingRuleUpdate,
    admin_service: AdminService = Depends(get_admin_service),
) -> PricingRuleResponse:
    try:
        rule = await asyncio.to_thread(admin_service.update_rule, rule_id, data)
        return PricingRuleResponse.model_validate(rule)
    except DomainException as e:
        raise e.to_http_exception() from e


@router.delete("/pricing-rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pricing_rule(
    rule_id: str, admin_service: AdminService = Depends(get_admin_service)
) -> Response:
    try:
        await asyncio.to_thread(admin_service.delete_rule, rule_id)
    except DomainException as e:
        raise e.to_http_exception() from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/courts/{court_id}/toggle", response_model=CourtResponse)
async def toggle_court(
    court_id: str, admin_service: AdminService = Depends(get_admin_service)
) -> CourtResponse:
    try:
        court = await asyncio.to_thread(admin_service.toggle_court, court_id)
        return CourtResponse.model_validate(court)
    except DomainException as e:
        raise e.to_http_exception() from e


@router.patch("/equipment/{equipment_id}/toggle", response_model=EquipmentResponse)
async def toggle_equipment(
    equipment_id: str, admin_service: AdminService = Depends(get_admin_service)
) -> EquipmentResponse:
    try:
        item = await asyncio.to_thread(admin_service.toggle_equipment, equipment_id)
        return EquipmentResponse.model_validate(item)
    except DomainException as e:
        raise e.to_http_exception() from e


@router.patch("/coaches/{coach_id}/toggle", response_model=CoachResponse)
async def toggle_coach(
    coach_id: str, admin_service: AdminService = Depends(get_admin_service)
) -> CoachResponse:
    try:
        coach = await asyncio.to_thread(admin_service.toggle_coach, coach_id)
        return CoachResponse.model_validate(coach)
    except DomainException as e:
        raise e.to_http_exception() from e


@router.patch("/equipment/{equipment_id}", response_model=EquipmentResponse)
async def update_equipment(
    equipment_id: str,
    data: EquipmentStockUpdate,
    admin_service: AdminService = Depends(get_admin_service),
) -> EquipmentResponse:
    try:
        item = await asyncio.to_thread(admin_service.update_equipment, equipment_id, data)
        return EquipmentResponse.model_validate(item)
    except DomainException as e:
        raise e.to_http_exception() from e
