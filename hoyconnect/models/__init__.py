"""Database models."""

from hoyconnect.models.booking import Booking, Inquiry
from hoyconnect.models.listing import Listing
from hoyconnect.models.payment import BookingPayment, HostWallet, Transaction

__all__ = [
    # Listing
    "Listing",
    # Booking
    "Booking",
    "Inquiry",
    # Payment
    "BookingPayment",
    "HostWallet",
    "Transaction",
]
