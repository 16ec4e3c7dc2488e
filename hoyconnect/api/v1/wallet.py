"""Host wallet endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hoyconnect.api.deps import Actor, get_current_host, get_db
from hoyconnect.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from hoyconnect.models.payment import HostWallet
from hoyconnect.schemas.payment import WalletCreate, WalletResponse, WalletUpdate
from hoyconnect.services.wallet_service import wallet_service

router = APIRouter()


@router.get("", response_model=WalletResponse)
async def get_wallet(
    actor: Annotated[Actor, Depends(get_current_host)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HostWallet:
    """Get the caller's wallet and earnings balance."""
    wallet = await wallet_service.get_wallet(db, actor.id)
    if wallet is None:
        raise NotFoundError("Wallet for host", str(actor.id))
    return wallet


@router.post("", response_model=WalletResponse, status_code=status.HTTP_201_CREATED)
async def create_wallet(
    request: WalletCreate,
    actor: Annotated[Actor, Depends(get_current_host)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HostWallet:
    """Register the caller's mobile-money wallet number."""
    if actor.role != "host":
        raise AuthorizationError("Host access required")
    return await wallet_service.create_wallet(db, actor.id, request.wallet_number)


@router.put("", response_model=WalletResponse)
async def update_wallet(
    request: WalletUpdate,
    actor: Annotated[Actor, Depends(get_current_host)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HostWallet:
    """Update a wallet number (host) or verify a wallet (admin)."""
    if request.verified is not None and not actor.is_admin:
        raise AuthorizationError("Only admins can verify wallets")

    host_id = actor.id
    if actor.is_admin:
        if request.host_id is None:
            raise ValidationError("host_id is required")
        host_id = request.host_id

    return await wallet_service.update_wallet(
        db, host_id, wallet_number=request.wallet_number, verified=request.verified
    )
