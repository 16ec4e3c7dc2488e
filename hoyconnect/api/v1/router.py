"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from hoyconnect.api.v1 import bookings, commission, inquiries, payments, wallet

api_router = APIRouter()

# Commission
api_router.include_router(commission.router, prefix="/commission", tags=["Commission"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Payments
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])

# Host wallet
api_router.include_router(wallet.router, prefix="/host/wallet", tags=["Wallet"])

# Inquiries
api_router.include_router(inquiries.router, prefix="/inquiries", tags=["Inquiries"])
