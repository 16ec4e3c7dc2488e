"""Commission endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hoyconnect.api.deps import Actor, get_current_admin, get_db
from hoyconnect.domain.property_types import PropertyTypeConfig
from hoyconnect.schemas.commission import (
    CommissionAnalyticsResponse,
    CommissionBreakdownResponse,
    CommissionCalculateRequest,
    CommissionSettingResponse,
    PropertyTypeRateResponse,
)
from hoyconnect.services.commission_service import CommissionAnalytics, commission_service

router = APIRouter()


@router.get("/rates", response_model=list[PropertyTypeRateResponse])
async def list_commission_rates() -> list[PropertyTypeConfig]:
    """Commission rate and capabilities per property type."""
    return list(commission_service.registry.configs.values())


@router.post("/calculate", response_model=CommissionBreakdownResponse)
async def calculate_commission(
    request: CommissionCalculateRequest,
) -> CommissionBreakdownResponse:
    """Preview the commission split for an amount."""
    breakdown = commission_service.compute_commission(request.amount, request.property_type)
    return CommissionBreakdownResponse(
        subtotal=breakdown.subtotal,
        commission_rate=breakdown.commission_rate,
        commission_amount=breakdown.commission_amount,
        host_earnings=breakdown.host_earnings,
        property_type=breakdown.property_type,
        display=commission_service.format_breakdown(breakdown),
    )


@router.get("/settings", response_model=list[CommissionSettingResponse])
async def list_commission_settings(
    admin: Annotated[Actor, Depends(get_current_admin)],
) -> list[dict]:
    """Commission settings per property type (admin only)."""
    return commission_service.all_settings()


@router.get("/analytics", response_model=list[CommissionAnalyticsResponse])
async def get_commission_analytics(
    admin: Annotated[Actor, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[CommissionAnalytics]:
    """Revenue and commission totals per bookable property type (admin only)."""
    return await commission_service.analytics(db)
