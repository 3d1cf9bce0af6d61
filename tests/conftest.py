import pytest
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool
import tempfile
import os
from datetime import datetime, timedelta, timezone

from parkpass.infrastructure.persistence.models.models import Base
from parkpass.infrastructure.persistence.memory_repository import InMemorySnapshotRepository
from parkpass.application.services.ledger_service import LedgerStore
from parkpass.application.services.analytics_service import AnalyticsService
from parkpass.config.settings_env import Settings
from parkpass.domain.common import UserType, PriceType


STORAGE_KEY = "parkpass_test"


@pytest.fixture(scope="function")
async def test_db():
    """Create a test database for each test function."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as tmp_file:
        test_db_path = tmp_file.name

    # NullPool avoids sharing aiosqlite connections between tests
    test_db_url = f"sqlite+aiosqlite:///{test_db_path}"
    engine = create_async_engine(
        test_db_url,
        poolclass=NullPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    yield async_session_maker

    await engine.dispose()
    os.unlink(test_db_path)


@pytest.fixture
async def db_session(test_db):
    """Create a database session for a test."""
    async with test_db() as session:
        yield session
        await session.rollback()


@pytest.fixture
def test_settings():
    """Provide test settings."""
    return Settings(
        DATABASE_URL="sqlite:///:memory:",
        ASYNC_DATABASE_URL="sqlite+aiosqlite:///:memory:",
        STORAGE_KEY=STORAGE_KEY,
        MAX_VEHICLES_PER_CUSTOMER=3,
        ENFORCE_CAPACITY=False,
    )


@pytest.fixture
def snapshot_repo():
    return InMemorySnapshotRepository()


@pytest.fixture
async def ledger_store(snapshot_repo, test_settings):
    """An empty ledger backed by the in-memory snapshot repository."""
    return await LedgerStore.open(
        snapshot_repo,
        storage_key=test_settings.STORAGE_KEY,
        max_vehicles_per_customer=test_settings.MAX_VEHICLES_PER_CUSTOMER,
        enforce_capacity=test_settings.ENFORCE_CAPACITY,
    )


@pytest.fixture
async def owner(ledger_store):
    return await ledger_store.create_user(
        name="Sarah Wilson",
        email="owner@example.com",
        phone="+1 (555) 987-6543",
        password="secret",
        user_type=UserType.OWNER,
    )


@pytest.fixture
async def customer(ledger_store):
    return await ledger_store.create_user(
        name="John Doe",
        email="driver@example.com",
        phone="+1 (555) 123-4567",
        password="secret",
        user_type=UserType.CUSTOMER,
    )


@pytest.fixture
async def customer_vehicle(ledger_store, customer):
    return await ledger_store.add_vehicle(
        customer.id, make="Toyota", model="Camry", license_plate="ABC-123", color="Silver"
    )


@pytest.fixture
async def hourly_spot(ledger_store, owner):
    """Hourly spot priced at 25 with two slots."""
    return await ledger_store.create_spot(
        owner_id=owner.id,
        name="Central Plaza Parking",
        address="123 Main Street, Downtown",
        price=25,
        price_type=PriceType.HOUR,
        total_slots=2,
        description="Covered parking downtown",
    )


@pytest.fixture
async def daily_spot(ledger_store, owner):
    """Daily spot priced at 150 with three slots."""
    return await ledger_store.create_spot(
        owner_id=owner.id,
        name="Riverside Mall Parking",
        address="456 River Road, Westside",
        price=150,
        price_type=PriceType.DAY,
        total_slots=3,
        description="Mall parking with valet service",
    )


@pytest.fixture
def booking_window():
    """A two-hour window starting tomorrow."""
    start = (datetime.now(timezone.utc) + timedelta(days=1)).replace(microsecond=0)
    return start, start + timedelta(hours=2)


@pytest.fixture
async def sample_booking(ledger_store, hourly_spot, customer, customer_vehicle, booking_window):
    start, end = booking_window
    return await ledger_store.create_booking(
        spot_id=hourly_spot.id,
        user_id=customer.id,
        vehicle_id=customer_vehicle.id,
        start_time=start,
        end_time=end,
        total_cost=50,
    )


@pytest.fixture
async def analytics_service(ledger_store):
    """Create an AnalyticsService over the test ledger."""
    return AnalyticsService(ledger_store)
