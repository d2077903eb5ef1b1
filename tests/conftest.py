"""Shared test fixtures and configuration."""
import pytest
import os
from decimal import Decimal
from unittest.mock import Mock, AsyncMock
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RESTAURANT_NAME", "Test Restaurant")
os.environ.setdefault("DASHBOARD_PASSWORD", "testpass123")

from app.main import app
from app.db.database import get_db
from app.db.models import Base
from app.core.config import Settings
from app.core.dependencies import get_charge_settings_provider
from app.services.pricing.models import ChargeSettings, LineItem
from app.services.settings.static import StaticChargeSettingsProvider


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def test_settings():
    """Override settings for testing."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        restaurant_name="Test Restaurant",
        dashboard_password="testpass123",
        gst_rate_percent=Decimal("5"),
        delivery_charge=Decimal("40"),
        service_charge=Decimal("10"),
        currency_symbol="₹",
        currency_locale="en-IN",
    )


@pytest.fixture
def charge_settings():
    """5% GST, 40 delivery, 10 service."""
    return ChargeSettings(
        gst_rate_percent=Decimal("5"),
        delivery_charge=Decimal("40"),
        service_charge=Decimal("10"),
    )


@pytest.fixture
def biryani_order():
    """Two plates of biryani at 250.00."""
    return [LineItem(name="Biryani", quantity=2, unit_price=Decimal("250.00"))]


@pytest.fixture
def settings_provider(charge_settings):
    """Fresh in-memory charge settings provider."""
    return StaticChargeSettingsProvider(charge_settings)


@pytest.fixture
async def test_db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_db(test_db_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def override_get_db(test_db):
    """Override get_db dependency with test database."""
    async def _override_get_db():
        yield test_db
    return _override_get_db


@pytest.fixture
def test_client(override_get_db, settings_provider, test_settings, monkeypatch):
    """Create FastAPI test client with overrides."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_charge_settings_provider] = lambda: settings_provider

    # Override settings in modules that use it
    monkeypatch.setattr("app.core.config.settings", test_settings)
    monkeypatch.setattr("app.api.auth.settings", test_settings)
    monkeypatch.setattr("app.api.pricing.settings", test_settings)

    client = TestClient(app)

    yield client

    app.dependency_overrides.clear()


@pytest.fixture
def failing_settings_client(test_client):
    """Test client whose charge settings backend is unreachable."""
    provider = Mock()
    provider.get_current_charge_settings = AsyncMock(
        side_effect=RuntimeError("database is down")
    )
    app.dependency_overrides[get_charge_settings_provider] = lambda: provider
    return test_client


@pytest.fixture
def clean_auth_sessions():
    """Clean up authentication sessions before and after tests."""
    from app.api import auth
    auth._sessions.clear()
    yield
    auth._sessions.clear()


@pytest.fixture
def authenticated_client(test_client, test_settings, clean_auth_sessions):
    """Create test client with valid admin session cookie."""
    response = test_client.post(
        "/api/auth/login",
        json={"password": test_settings.dashboard_password}
    )
    assert response.status_code == 200

    # Session cookie is automatically stored in test_client
    return test_client
