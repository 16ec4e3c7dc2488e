"""Commission-related Pydantic schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from hoyconnect.domain.property_types import PropertyType


class CommissionCalculateRequest(BaseModel):
    """Schema for previewing a commission split."""

    amount: Decimal = Field(..., ge=0)
    property_type: PropertyType


class CommissionBreakdownResponse(BaseModel):
    """Schema for a commission breakdown."""

    model_config = ConfigDict(from_attributes=True)

    subtotal: Decimal
    commission_rate: Decimal
    commission_amount: Decimal
    host_earnings: Decimal
    property_type: PropertyType
    display: dict[str, str]


class PropertyTypeRateResponse(BaseModel):
    """Schema for one row of the commission rate table."""

    model_config = ConfigDict(from_attributes=True)

    type: PropertyType
    label: str
    commission_rate: Decimal
    booking_enabled: bool
    payment_enabled: bool
    inquiry_enabled: bool
    agent_call_enabled: bool
    description: str


class CommissionSettingResponse(BaseModel):
    """Schema for an admin view of one property type's commission settings."""

    property_type: PropertyType
    label: str
    commission_rate: Decimal
    agent_call_enabled: bool
    description: str
    guest_description: str


class CommissionAnalyticsResponse(BaseModel):
    """Schema for commission totals of one property type."""

    model_config = ConfigDict(from_attributes=True)

    property_type: PropertyType
    total_bookings: int
    total_revenue: Decimal
    total_commission: Decimal
    host_earnings: Decimal
    average_commission_rate: Decimal
