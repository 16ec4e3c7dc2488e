import os

# Must be set before hoyconnect.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import uuid
from datetime import date, timedelta
from decimal import Decimal

import httpx
import pytest
from httpx import ASGITransport
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import hoyconnect.models  # noqa: F401
from hoyconnect.database import Base, get_db
from hoyconnect.models import HostWallet, Listing
from hoyconnect.services.booking_service import booking_service

CHECK_IN = date.today() + timedelta(days=30)
CHECK_OUT = CHECK_IN + timedelta(days=3)


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy emit BEGIN
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine):
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def stay():
    """Three-night stay a month from today."""
    return CHECK_IN, CHECK_OUT


@pytest.fixture
def make_listing(db):
    async def _make(
        listing_type="hotel",
        price_per_night=Decimal("100"),
        approval_status="approved",
        is_available=True,
        max_guests=4,
        host_id=None,
    ):
        listing = Listing(
            host_id=host_id or uuid.uuid4(),
            title=f"Test {listing_type}",
            listing_type=listing_type,
            approval_status=approval_status,
            is_available=is_available,
            price_per_night=price_per_night,
            max_guests=max_guests,
        )
        db.add(listing)
        await db.flush()
        return listing

    return _make


@pytest.fixture
def make_booking(db, make_listing):
    async def _make(listing_type="hotel", price_per_night=Decimal("100"), guest_id=None):
        listing = await make_listing(listing_type=listing_type, price_per_night=price_per_night)
        return await booking_service.create_booking(
            db,
            guest_id=guest_id or uuid.uuid4(),
            listing_id=listing.id,
            check_in=CHECK_IN,
            check_out=CHECK_OUT,
            num_guests=2,
        )

    return _make


@pytest.fixture
def load_wallet(db):
    async def _load(host_id):
        result = await db.execute(
            select(HostWallet)
            .where(HostWallet.host_id == host_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    return _load


@pytest.fixture
async def client(db):
    from hoyconnect.main import app

    async def _override_get_db():
        try:
            yield db
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    app.dependency_overrides[get_db] = _override_get_db
    async with httpx.AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()
