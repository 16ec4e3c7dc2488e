"""Commission calculation service.

BUSINESS RULES:
- Hotels pay 15% commission on every booking
- Fully furnished properties pay 12%
- Rentals are inquiry only: no online booking, no automatic commission
- Commission is fixed on the booking's total price when the booking is created
- Values keep full precision; only display formatting rounds to 2 decimals
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hoyconnect.core.exceptions import InvalidPropertyType
from hoyconnect.domain.property_types import (
    PropertyType,
    PropertyTypeRegistry,
    property_type_registry,
)
from hoyconnect.models.booking import Booking
from hoyconnect.models.payment import BookingPayment

HUNDRED = Decimal("100")
CENTS = Decimal("0.01")

ADMIN_DESCRIPTIONS = {
    PropertyType.HOTEL: "Commission applied per confirmed hotel booking",
    PropertyType.FULLY_FURNISHED: "Commission applied per confirmed furnished property booking",
    PropertyType.RENTAL: "No automatic commission - inquiries and manual handling only",
}


@dataclass(frozen=True)
class CommissionBreakdown:
    """Split of a booking amount between the platform and the host."""

    subtotal: Decimal
    commission_rate: Decimal
    commission_amount: Decimal
    host_earnings: Decimal
    property_type: PropertyType


@dataclass
class CommissionAnalytics:
    """Aggregated commission figures for one property type."""

    property_type: PropertyType
    total_bookings: int = 0
    total_revenue: Decimal = Decimal("0")
    total_commission: Decimal = Decimal("0")
    host_earnings: Decimal = Decimal("0")

    @property
    def average_commission_rate(self) -> Decimal:
        if not self.total_revenue:
            return Decimal("0")
        return self.total_commission / self.total_revenue * HUNDRED


def _to_decimal(amount: Decimal | int | float | str) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    # str() keeps 0.1 as 0.1 instead of its binary expansion
    return Decimal(str(amount))


class CommissionService:
    """Service for calculating booking commissions and host earnings."""

    def __init__(self, registry: PropertyTypeRegistry = property_type_registry):
        self.registry = registry

    def compute_commission(
        self,
        amount: Decimal | int | float | str,
        property_type: PropertyType | str,
    ) -> CommissionBreakdown:
        """Split a booking amount into platform commission and host earnings.

        Args:
            amount: Total booking price
            property_type: The listing's property type

        Returns:
            CommissionBreakdown: subtotal, rate, commission and host earnings

        Raises:
            InvalidPropertyType: If the property type does not support bookings
        """
        config = self.registry.config_for(property_type)
        if not config.booking_enabled:
            raise InvalidPropertyType(property_type)

        subtotal = _to_decimal(amount)
        if subtotal < 0:
            raise ValueError(f"Commission amount must not be negative, got {subtotal}")

        commission_amount = (
            subtotal * config.commission_rate / HUNDRED
            if config.commission_rate > 0
            else Decimal("0")
        )
        return CommissionBreakdown(
            subtotal=subtotal,
            commission_rate=config.commission_rate,
            commission_amount=commission_amount,
            host_earnings=subtotal - commission_amount,
            property_type=config.type,
        )

    def host_earnings_for(
        self,
        total_price: Decimal | int | float | str,
        commission_amount: Decimal | int | float | str,
    ) -> Decimal:
        """Host share of a booking from its stored price and commission."""
        return _to_decimal(total_price) - _to_decimal(commission_amount)

    def format_breakdown(self, breakdown: CommissionBreakdown) -> dict[str, str]:
        """Display strings, rounded to 2 decimal places."""
        return {
            "subtotal": f"${breakdown.subtotal.quantize(CENTS)}",
            "commission": f"${breakdown.commission_amount.quantize(CENTS)}",
            "host_earnings": f"${breakdown.host_earnings.quantize(CENTS)}",
            "commission_rate": f"{breakdown.commission_rate.normalize():f}%",
        }

    def aggregate(
        self, breakdowns: Iterable[CommissionBreakdown]
    ) -> dict[PropertyType, CommissionAnalytics]:
        """Aggregate breakdowns per property type."""
        by_type: dict[PropertyType, CommissionAnalytics] = {}
        for breakdown in breakdowns:
            analytics = by_type.setdefault(
                breakdown.property_type, CommissionAnalytics(breakdown.property_type)
            )
            analytics.total_bookings += 1
            analytics.total_revenue += breakdown.subtotal
            analytics.total_commission += breakdown.commission_amount
            analytics.host_earnings += breakdown.host_earnings
        return by_type

    def settings_for(self, property_type: PropertyType | str) -> dict:
        """Commission settings shown to admins for a property type."""
        config = self.registry.config_for(property_type)
        return {
            "property_type": config.type,
            "label": config.label,
            "commission_rate": config.commission_rate,
            "agent_call_enabled": self.registry.can_call_agent(config.type),
            "description": ADMIN_DESCRIPTIONS[config.type],
            "guest_description": self.registry.description(config.type),
        }

    def all_settings(self) -> list[dict]:
        """Settings for bookable types first, then inquiry-only ones."""
        types = self.registry.bookable_types() + self.registry.inquiry_types()
        return [self.settings_for(property_type) for property_type in types]

    async def analytics(self, db: AsyncSession) -> list[CommissionAnalytics]:
        """Commission totals per bookable type over completed payments.

        Refunded payments are left out. Types with no payments report zeros.
        """
        result = await db.execute(
            select(
                Booking.property_type,
                BookingPayment.amount,
                BookingPayment.commission_rate,
                BookingPayment.commission_amount,
                BookingPayment.host_earnings,
            )
            .join(Booking, Booking.id == BookingPayment.booking_id)
            .where(BookingPayment.status == "completed")
        )
        by_type = self.aggregate(
            CommissionBreakdown(
                subtotal=row.amount,
                commission_rate=row.commission_rate,
                commission_amount=row.commission_amount,
                host_earnings=row.host_earnings,
                property_type=self.registry.config_for(row.property_type).type,
            )
            for row in result
        )
        return [
            by_type.get(property_type, CommissionAnalytics(property_type))
            for property_type in self.registry.bookable_types()
        ]


commission_service = CommissionService()
