"""Shared fixtures: in-memory SQLite database, seeded catalog and an HTTP client"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from agenda.config.database import get_db
from agenda.main import create_app
from agenda.models import Base, Client, Service, SubService


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seed(db):
    """C1 with a contact number, C2 without one, S1 = 50000, S2 = 30000"""
    service = Service(name="Peluquería")
    db.add(service)
    await db.flush()

    s1 = SubService(service_id=service.id, name="Corte", price=50000)
    s2 = SubService(service_id=service.id, name="Lavado", price=30000)
    c1 = Client(name="Ana Benítez", contact="+595981111111", is_minor=False)
    c2 = Client(name="Luis Sin Contacto", contact=None, is_minor=False)
    db.add_all([s1, s2, c1, c2])
    await db.commit()

    return SimpleNamespace(service=service, s1=s1, s2=s2, c1=c1, c2=c2)


@pytest.fixture
async def api(session_factory):
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http

