"""Property type registry.

Three property categories, each with a fixed commission rate and capability flags:

- hotel: 15% commission, online booking and payment
- fully_furnished: 12% commission, online booking and payment
- rental: 0% commission, inquiry only (guests contact the host or agent)
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from hoyconnect.core.exceptions import InvalidPropertyType

logger = logging.getLogger(__name__)


class PropertyType(str, Enum):
    """Property categories."""

    HOTEL = "hotel"
    FULLY_FURNISHED = "fully_furnished"
    RENTAL = "rental"


@dataclass(frozen=True)
class PropertyTypeConfig:
    """Commission rate and capabilities for a property type."""

    type: PropertyType
    label: str
    commission_rate: Decimal
    booking_enabled: bool
    payment_enabled: bool
    inquiry_enabled: bool
    agent_call_enabled: bool
    description: str

    def __post_init__(self) -> None:
        if self.booking_enabled == self.inquiry_enabled:
            raise ValueError(
                f"{self.type.value}: exactly one of booking/inquiry must be enabled"
            )
        if not Decimal("0") <= self.commission_rate <= Decimal("100"):
            raise ValueError(f"{self.type.value}: commission rate out of range")
        # Stored commissions carry two decimals more than prices
        if self.commission_rate != self.commission_rate.to_integral_value():
            raise ValueError(f"{self.type.value}: commission rate must be a whole percentage")


DEFAULT_CONFIGS: tuple[PropertyTypeConfig, ...] = (
    PropertyTypeConfig(
        type=PropertyType.HOTEL,
        label="Hotel",
        commission_rate=Decimal("15"),
        booking_enabled=True,
        payment_enabled=True,
        inquiry_enabled=False,
        agent_call_enabled=False,
        description="15% commission per booking. Online booking and payment enabled.",
    ),
    PropertyTypeConfig(
        type=PropertyType.FULLY_FURNISHED,
        label="Fully Furnished",
        commission_rate=Decimal("12"),
        booking_enabled=True,
        payment_enabled=True,
        inquiry_enabled=False,
        agent_call_enabled=False,
        description="12% commission per booking. Online booking and payment enabled.",
    ),
    PropertyTypeConfig(
        type=PropertyType.RENTAL,
        label="Rental",
        commission_rate=Decimal("0"),
        booking_enabled=False,
        payment_enabled=False,
        inquiry_enabled=True,
        agent_call_enabled=True,
        description="Inquiry-based. No online booking or automatic commission.",
    ),
)

# Raw listing categories as stored on listings
LISTING_TYPE_ALIASES: Mapping[str, PropertyType] = MappingProxyType(
    {
        "hotel": PropertyType.HOTEL,
        "fully_furnished": PropertyType.FULLY_FURNISHED,
        "furnished": PropertyType.FULLY_FURNISHED,
        "guesthouse": PropertyType.FULLY_FURNISHED,
        "rental": PropertyType.RENTAL,
    }
)

FALLBACK_TYPE = PropertyType.RENTAL


class PropertyTypeRegistry:
    """Immutable lookup of property type configs.

    Unknown types resolve to the rental config (non-bookable, no commission)
    and log a warning. With ``strict=True`` they raise InvalidPropertyType.
    """

    def __init__(self, configs: Iterable[PropertyTypeConfig] = DEFAULT_CONFIGS, strict: bool = False):
        table = {config.type: config for config in configs}
        missing = set(PropertyType) - set(table)
        if missing:
            raise ValueError(f"Missing property type configs: {sorted(t.value for t in missing)}")
        self._configs: Mapping[PropertyType, PropertyTypeConfig] = MappingProxyType(table)
        self.strict = strict

    @property
    def configs(self) -> Mapping[PropertyType, PropertyTypeConfig]:
        return self._configs

    def config_for(self, property_type: "PropertyType | str") -> PropertyTypeConfig:
        """Get the config for a property type, failing closed on unknown types."""
        try:
            return self._configs[PropertyType(property_type)]
        except ValueError:
            if self.strict:
                raise InvalidPropertyType(
                    property_type, detail=f"Invalid property type: {property_type}"
                ) from None
            logger.warning(
                "Invalid property type: %r. Defaulting to %s.", property_type, FALLBACK_TYPE.value
            )
            return self._configs[FALLBACK_TYPE]

    def resolve_listing_type(self, listing_type: str | None) -> PropertyType:
        """Map a listing's raw category to its property type."""
        resolved = LISTING_TYPE_ALIASES.get((listing_type or "").lower())
        if resolved is None:
            logger.warning(
                "Unknown listing type: %r. Treating as %s.", listing_type, FALLBACK_TYPE.value
            )
            return FALLBACK_TYPE
        return resolved

    def is_bookable(self, property_type: "PropertyType | str") -> bool:
        return self.config_for(property_type).booking_enabled

    def is_payable(self, property_type: "PropertyType | str") -> bool:
        return self.config_for(property_type).payment_enabled

    def has_commission(self, property_type: "PropertyType | str") -> bool:
        return self.config_for(property_type).commission_rate > 0

    def rate(self, property_type: "PropertyType | str") -> Decimal:
        """Commission rate as a percentage (15 for 15%)."""
        return self.config_for(property_type).commission_rate

    def is_inquiry_only(self, property_type: "PropertyType | str") -> bool:
        return self.config_for(property_type).inquiry_enabled

    def can_call_agent(self, property_type: "PropertyType | str") -> bool:
        return self.config_for(property_type).agent_call_enabled

    def label(self, property_type: "PropertyType | str") -> str:
        return self.config_for(property_type).label

    def description(self, property_type: "PropertyType | str") -> str:
        return self.config_for(property_type).description

    def bookable_types(self) -> list[PropertyType]:
        return [c.type for c in self._configs.values() if c.booking_enabled]

    def inquiry_types(self) -> list[PropertyType]:
        return [c.type for c in self._configs.values() if c.inquiry_enabled]


def build_registry(strict: bool | None = None) -> PropertyTypeRegistry:
    """Build the registry from settings."""
    if strict is None:
        from hoyconnect.config import settings

        strict = settings.strict_property_types
    return PropertyTypeRegistry(DEFAULT_CONFIGS, strict=strict)


property_type_registry = build_registry()
