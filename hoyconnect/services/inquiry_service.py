"""Inquiries for inquiry-only listings (rentals)."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hoyconnect.core.exceptions import InvalidPropertyType, ListingNotAvailable, NotFoundError
from hoyconnect.domain.property_types import PropertyTypeRegistry, property_type_registry
from hoyconnect.models.booking import Inquiry
from hoyconnect.models.listing import Listing

logger = logging.getLogger(__name__)


class InquiryService:
    """Rental listings take inquiries instead of bookings."""

    def __init__(self, registry: PropertyTypeRegistry = property_type_registry):
        self.registry = registry

    async def create_inquiry(
        self,
        db: AsyncSession,
        guest_id: UUID,
        listing_id: UUID,
        message: str,
        contact_phone: str | None = None,
    ) -> Inquiry:
        result = await db.execute(select(Listing).where(Listing.id == listing_id))
        listing = result.scalar_one_or_none()
        if listing is None:
            raise NotFoundError("Listing", str(listing_id))
        if listing.approval_status != "approved":
            raise ListingNotAvailable()

        property_type = self.registry.resolve_listing_type(listing.listing_type)
        if not self.registry.is_inquiry_only(property_type):
            raise InvalidPropertyType(
                property_type.value,
                detail=f"{self.registry.label(property_type)} listings are booked online, not by inquiry",
            )

        inquiry = Inquiry(
            listing_id=listing.id,
            guest_id=guest_id,
            host_id=listing.host_id,
            message=message,
            contact_phone=contact_phone,
            status="new",
        )
        db.add(inquiry)
        await db.flush()
        await db.refresh(inquiry)
        logger.info("Inquiry %s created for listing %s", inquiry.id, listing.id)
        return inquiry


inquiry_service = InquiryService()
