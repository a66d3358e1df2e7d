import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from agriquote.main import app
from agriquote.core import redis as redis_module
from agriquote.core.security import create_access_token
from agriquote.core.enums import UserRole
from agriquote.db.session import get_db
from agriquote.models.base import Base
from agriquote.models.rate_card import RateCard
from agriquote.models import audit  # noqa: F401


TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")


class InMemoryRedis:
    """Just enough of the redis.asyncio API for rate limiting and idempotency."""

    def __init__(self):
        self.store = {}

    async def ping(self):
        return True

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value if isinstance(value, bytes) else str(value).encode()
        return True

    async def incr(self, key):
        value = int(self.store.get(key, b"0")) + 1
        self.store[key] = str(value).encode()
        return value

    async def delete(self, *keys):
        return sum(1 for key in keys if self.store.pop(key, None) is not None)

    async def aclose(self):
        self.store.clear()


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_redis(monkeypatch):
    fake = InMemoryRedis()
    monkeypatch.setattr(redis_module, "redis", fake)
    return fake


@pytest.fixture
async def test_client(session_factory, fake_redis):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_token():
    return create_access_token("admin_1", UserRole.ADMIN)


@pytest.fixture
def seller_token():
    return create_access_token("seller_1", UserRole.SELLER, org_id="org_lenzi")


@pytest.fixture
def other_seller_token():
    return create_access_token("seller_2", UserRole.SELLER, org_id="org_rossi")


@pytest.fixture
def auth_headers(seller_token):
    return {"Authorization": f"Bearer {seller_token}"}


@pytest.fixture
def valid_rate_card_data():
    return {
        "seller_org_id": "org_lenzi",
        "service_type": "IRRORAZIONE",
        "base_rate_per_ha_cents": 1000,
        "min_charge_cents": 5000,
        "travel_rate_per_km_cents": 120,
        "seasonal_multipliers_json": {"7": 1.1},
        "risk_multipliers_json": {"steep_slope": 1.25},
    }


@pytest.fixture
def valid_quote_data():
    return {
        "seller_org_id": "org_lenzi",
        "service_type": "IRRORAZIONE",
        "area_ha": 10,
        "distance_km": 20,
        "month": 7,
    }


@pytest.fixture
def create_rate_card_factory(session_factory):
    async def _create_rate_card(**kwargs):
        data = {
            "seller_org_id": "org_lenzi",
            "service_type": "IRRORAZIONE",
            "base_rate_per_ha_cents": 1000,
            "min_charge_cents": 5000,
            "travel_rate_per_km_cents": 120,
            "seasonal_multipliers_json": {"7": 1.1},
            "risk_multipliers_json": {},
        }
        data.update(kwargs)
        async with session_factory() as session:
            rate_card = RateCard(**data)
            session.add(rate_card)
            await session.commit()
            await session.refresh(rate_card)
            return rate_card

    return _create_rate_card


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing"
    )
    config.addinivalue_line(
        "markers", "crud: marks tests related to CRUD operations"
    )
    config.addinivalue_line(
        "markers", "auth: marks tests related to authentication"
    )
    config.addinivalue_line(
        "markers", "rate_limit: marks tests related to rate limiting"
    )
    config.addinivalue_line(
        "markers", "idempotency: marks tests related to idempotency"
    )
