"""Test fixtures for the GroomFlow backend."""
from __future__ import annotations

import os
import uuid
from collections.abc import AsyncIterator
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from groomflow.core.config import get_settings
from groomflow.core.security import get_password_hash
from groomflow.db.base import Base
from groomflow.db.session import dispose_engine, get_sessionmaker
from groomflow.main import app
from groomflow.models import (
    Client,
    Kennel,
    Pet,
    PetType,
    Salon,
    Service,
    SizeClass,
    User,
    UserRole,
    UserStatus,
)
from groomflow.services import change_feed

MANAGER_PASSWORD = "Passw0rd!"
GROOMER_PASSWORD = "Groom3r!"


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest.fixture(autouse=True)
def reset_change_feed() -> None:
    change_feed.clear()


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def session(reset_database: None, db_url: str) -> AsyncIterator[AsyncSession]:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as db_session:
        yield db_session


async def seed_salon(db_session: AsyncSession, *, slug: str | None = None) -> dict[str, object]:
    """Create a salon with staff, one client, pets of each size, kennels and services."""
    salon = Salon(name="Suds & Snips", slug=slug or f"salon-{uuid.uuid4().hex[:8]}")
    db_session.add(salon)
    await db_session.flush()

    manager = User(
        salon_id=salon.id,
        email=f"manager+{salon.slug}@example.com",
        hashed_password=get_password_hash(MANAGER_PASSWORD),
        first_name="Casey",
        last_name="Manager",
        role=UserRole.MANAGER,
        status=UserStatus.ACTIVE,
    )
    groomer = User(
        salon_id=salon.id,
        email=f"groomer+{salon.slug}@example.com",
        hashed_password=get_password_hash(GROOMER_PASSWORD),
        first_name="Jamie",
        last_name="Trim",
        role=UserRole.GROOMER,
        status=UserStatus.ACTIVE,
    )
    client = Client(salon_id=salon.id, name="Taylor Owner", phone="555-0100")
    db_session.add_all([manager, groomer, client])
    await db_session.flush()

    pets = {
        "small": Pet(salon_id=salon.id, client_id=client.id, name="Pip", pet_type=PetType.DOG, size=SizeClass.SMALL),
        "medium": Pet(salon_id=salon.id, client_id=client.id, name="Biscuit", pet_type=PetType.DOG, size=SizeClass.MEDIUM),
        "large": Pet(salon_id=salon.id, client_id=client.id, name="Moose", pet_type=PetType.DOG, size=SizeClass.LARGE),
        "unsized": Pet(salon_id=salon.id, client_id=client.id, name="Whiskers", pet_type=PetType.CAT),
    }
    kennels = {
        "K1": Kennel(salon_id=salon.id, kennel_number="K1", size_class=SizeClass.SMALL),
        "K2": Kennel(salon_id=salon.id, kennel_number="K2", size_class=SizeClass.MEDIUM),
        "K3": Kennel(salon_id=salon.id, kennel_number="K3", size_class=SizeClass.LARGE),
    }
    bath = Service(salon_id=salon.id, name="Bath & Brush", price=Decimal("45.00"), duration_minutes=60)
    nails = Service(salon_id=salon.id, name="Nail Trim", price=Decimal("15.00"), duration_minutes=15)
    db_session.add_all([*pets.values(), *kennels.values(), bath, nails])
    await db_session.commit()

    return {
        "salon_id": salon.id,
        "manager_id": manager.id,
        "manager_email": manager.email,
        "groomer_id": groomer.id,
        "groomer_email": groomer.email,
        "client_id": client.id,
        "pet_ids": {size: pet.id for size, pet in pets.items()},
        "kennel_ids": {number: kennel.id for number, kennel in kennels.items()},
        "service_ids": {"bath": bath.id, "nails": nails.id},
    }


@pytest_asyncio.fixture()
async def salon(session: AsyncSession) -> dict[str, object]:
    return await seed_salon(session)


async def login(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    response = await client.post(
        "/api/v1/auth/token", data={"username": email, "password": password}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest_asyncio.fixture()
async def app_context(
    reset_database: None, db_url: str
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client, seeded salon data and auth headers."""
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as db_session:
        context = await seed_salon(db_session)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        context["manager_headers"] = await login(
            client, str(context["manager_email"]), MANAGER_PASSWORD
        )
        context["groomer_headers"] = await login(
            client, str(context["groomer_email"]), GROOMER_PASSWORD
        )
        yield context


@pytest.fixture()
def salon_factory():
    """Return the seeding helper so a test can create a second salon."""
    return seed_salon
