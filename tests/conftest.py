"""
Pytest configuration and fixtures.
"""

import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("COMMISSION_REFRESH_MINUTES", "0")

from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.models import AdDataEntry, Base, User, UserRole
from src.schemas.commission import DailyEntry


# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    # Let SQLAlchemy emit BEGIN itself so SAVEPOINTs nest properly
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def add_entry(db_session):
    """Insert an ad_data_entries row."""

    async def _add(day, staff, ad_spend=0, credit_card_amount=0, orders=0):
        entry = AdDataEntry(
            date=day,
            staff=staff,
            ad_spend=Decimal(str(ad_spend)),
            credit_card_amount=Decimal(str(credit_card_amount)),
            payment_info_count=0,
            credit_card_orders=orders,
        )
        db_session.add(entry)
        await db_session.flush()
        return entry

    return _add


@pytest_asyncio.fixture
async def add_user(db_session):
    """Insert a user without a real password hash."""

    async def _add(username, role=UserRole.OPERATOR, operator_code=None, password_hash="x"):
        user = User(
            username=username,
            password_hash=password_hash,
            role=role,
            display_name=username,
            operator_code=operator_code,
            is_active=True,
        )
        db_session.add(user)
        await db_session.flush()
        return user

    return _add


@pytest.fixture
def make_entry():
    """Build a canonical DailyEntry with sensible defaults."""

    def _make(operator="乔", day=date(2025, 8, 1), ad_spend=0, credit_card_amount=0, orders=0):
        return DailyEntry(
            date=day,
            operator=operator,
            ad_spend=Decimal(str(ad_spend)),
            credit_card_amount=Decimal(str(credit_card_amount)),
            order_count=orders,
        )

    return _make
