"""Tests for WalletService."""

import uuid
from decimal import Decimal

import pytest

from hoyconnect.core.exceptions import NotFoundError, ValidationError
from hoyconnect.services.wallet_service import WalletService, validate_wallet_number, wallet_service


@pytest.mark.parametrize("number", ["61512345", "6151234567890", "61512345a", ""])
def test_invalid_wallet_numbers(number):
    with pytest.raises(ValidationError):
        validate_wallet_number(number)


def test_wallet_number_is_trimmed():
    assert validate_wallet_number(" 615123456 ") == "615123456"


async def test_create_wallet(db):
    host_id = uuid.uuid4()
    wallet = await wallet_service.create_wallet(db, host_id, "615123456")

    assert wallet.host_id == host_id
    assert wallet.wallet_number == "615123456"
    assert not wallet.verified
    assert wallet.available_balance == Decimal("0")


async def test_create_wallet_twice(db):
    host_id = uuid.uuid4()
    await wallet_service.create_wallet(db, host_id, "615123456")
    with pytest.raises(ValidationError, match="already exists"):
        await wallet_service.create_wallet(db, host_id, "615999999")


async def test_new_number_resets_verification(db):
    host_id = uuid.uuid4()
    await wallet_service.create_wallet(db, host_id, "615123456")
    wallet = await wallet_service.update_wallet(db, host_id, verified=True)
    assert wallet.verified

    wallet = await wallet_service.update_wallet(db, host_id, wallet_number="615999999")
    assert wallet.wallet_number == "615999999"
    assert not wallet.verified


async def test_update_missing_wallet(db):
    with pytest.raises(NotFoundError):
        await wallet_service.update_wallet(db, uuid.uuid4(), verified=True)


async def test_credit_opens_wallet(db, load_wallet):
    host_id = uuid.uuid4()
    await wallet_service.credit(db, host_id, Decimal("85"), Decimal("15"))

    wallet = await load_wallet(host_id)
    assert wallet.wallet_number is None
    assert wallet.available_balance == Decimal("85")
    assert wallet.total_commission_paid == Decimal("15")


async def test_credits_accumulate(db, load_wallet):
    host_id = uuid.uuid4()
    await wallet_service.credit(db, host_id, Decimal("85"), Decimal("15"))
    await wallet_service.credit(db, host_id, Decimal("44"), Decimal("6"))

    wallet = await load_wallet(host_id)
    assert wallet.available_balance == Decimal("129")
    assert wallet.total_earnings == Decimal("129")
    assert wallet.total_commission_paid == Decimal("21")


async def test_credit_when_wallet_opened_concurrently(db, load_wallet):
    class RacingWallets(WalletService):
        raced = False

        async def _add_to_balance(self, db, host_id, earnings, commission):
            if not self.raced:
                # Another payment opens the wallet right after this update missed it
                self.raced = True
                await wallet_service._open_wallet(db, host_id, Decimal("50"), Decimal("5"))
                return 0
            return await super()._add_to_balance(db, host_id, earnings, commission)

    host_id = uuid.uuid4()
    await RacingWallets().credit(db, host_id, Decimal("85"), Decimal("15"))

    wallet = await load_wallet(host_id)
    assert wallet.available_balance == Decimal("135")
    assert wallet.total_earnings == Decimal("135")
    assert wallet.total_commission_paid == Decimal("20")


async def test_number_added_to_credited_wallet(db, load_wallet):
    host_id = uuid.uuid4()
    await wallet_service.credit(db, host_id, Decimal("85"), Decimal("15"))

    wallet = await wallet_service.create_wallet(db, host_id, "615123456")

    assert wallet.wallet_number == "615123456"
    assert wallet.available_balance == Decimal("85")


async def test_negative_credit_rejected(db):
    with pytest.raises(ValidationError):
        await wallet_service.credit(db, uuid.uuid4(), Decimal("-1"), Decimal("0"))


async def test_debit_missing_wallet(db):
    with pytest.raises(NotFoundError):
        await wallet_service.debit(db, uuid.uuid4(), Decimal("10"), Decimal("1"))
