"""HoyConnect bookings: commission, booking lifecycle and payment confirmation."""

__version__ = "1.0.0"
