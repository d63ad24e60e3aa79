"""Test configuration and fixtures"""

from datetime import date, datetime
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from uuid import uuid4

from app.main import app
from app.database import Base, get_db
from app.models.booking import Booking, BookingTable
from app.models.user import User, UserRole
from app.api.auth import get_password_hash, create_access_token
from app.api.bookings import get_today
from app.engine.permissions import permissions_for
from app.engine.types import BookingStatus, MealPeriod
from app.services.notifications import Notifier, get_notifier


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Monday
TODAY = date(2025, 1, 6)

TEST_PASSWORD_HASH = get_password_hash("testpass123")


class RecordingNotifier(Notifier):
    """Collects notifications instead of queueing them"""

    def __init__(self):
        self.sent = []

    def notify(self, event, payload):
        self.sent.append((event, payload))


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


async def _create_user(db, email, role, unit_number=None):
    user = User(
        id=uuid4(),
        email=email,
        hashed_password=TEST_PASSWORD_HASH,
        full_name=email.split("@")[0].title(),
        role=role,
        unit_number=unit_number,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def resident_user(test_db):
    """Resident of unit 12"""
    return await _create_user(test_db, "resident@example.com", UserRole.RESIDENT, unit_number=12)


@pytest.fixture
async def other_resident_user(test_db):
    """Resident of unit 7"""
    return await _create_user(test_db, "neighbour@example.com", UserRole.RESIDENT, unit_number=7)


@pytest.fixture
async def admin_user(test_db):
    return await _create_user(test_db, "admin@example.com", UserRole.ADMIN)


@pytest.fixture
async def it_admin_user(test_db):
    return await _create_user(test_db, "it@example.com", UserRole.IT_ADMIN)


@pytest.fixture
async def manager_user(test_db):
    return await _create_user(test_db, "manager@example.com", UserRole.MANAGER)


@pytest.fixture
def resident_permissions(resident_user):
    return permissions_for(resident_user.role, resident_user.id, resident_user.unit_number)


@pytest.fixture
def admin_permissions(admin_user):
    return permissions_for(admin_user.role, admin_user.id)


@pytest.fixture
def it_admin_permissions(it_admin_user):
    return permissions_for(it_admin_user.role, it_admin_user.id)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
async def make_client(test_db, notifier):
    """Factory for clients authenticated as a given user"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    app.dependency_overrides[get_notifier] = lambda: notifier

    clients = []

    async def _make(user=None):
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        if user is not None:
            client.headers["Authorization"] = f"Bearer {create_access_token(user)}"
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()
    app.dependency_overrides.clear()


@pytest.fixture
async def client(make_client):
    """Unauthenticated test client"""
    return await make_client()


@pytest.fixture
async def resident_client(make_client, resident_user):
    return await make_client(resident_user)


@pytest.fixture
async def other_resident_client(make_client, other_resident_user):
    return await make_client(other_resident_user)


@pytest.fixture
async def admin_client(make_client, admin_user):
    return await make_client(admin_user)


@pytest.fixture
async def it_admin_client(make_client, it_admin_user):
    return await make_client(it_admin_user)


@pytest.fixture
async def manager_client(make_client, manager_user):
    return await make_client(manager_user)


@pytest.fixture
def add_booking(test_db):
    """Insert a booking row directly, bypassing the service layer"""
    async def _add(
        unit_number,
        booking_date,
        tables,
        meal_period=MealPeriod.MIDDAY,
        status=BookingStatus.PENDING,
        attendees_planned=4,
        attendees_final=None,
        oven_requested=False,
        fire_preparation_requested=False,
        created_at=None,
    ):
        booking = Booking(
            unit_number=unit_number,
            date=booking_date,
            meal_period=meal_period,
            status=status,
            attendees_planned=attendees_planned,
            attendees_final=attendees_final,
            oven_requested=oven_requested,
            oven_slot=f"{booking_date.isoformat()}:{meal_period.value}" if oven_requested else None,
            fire_preparation_asked=fire_preparation_requested,
            fire_preparation_requested=fire_preparation_requested,
            created_at=created_at or datetime(2025, 1, 1, 9, 0),
            table_claims=[
                BookingTable(table_number=t, date=booking_date, meal_period=meal_period)
                for t in tables
            ],
        )
        test_db.add(booking)
        await test_db.commit()
        return booking

    return _add
