"""
Fixtures for integration tests.

Every test gets a fresh in-memory SQLite database built from the ORM
metadata and seeded with the default tier ladder. SQLite ignores
SELECT ... FOR UPDATE, so these tests cover the read-check-write logic
but not lock contention.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from referral_engine.config.settings import Settings
from referral_engine.models import Ambassador, Base
from referral_engine.services import AmbassadorService
from referral_engine.services.ambassador import (
    AmbassadorEnrollment,
    LedgerBalanceManager,
    TierCatalogService,
)


@pytest.fixture
def settings() -> Settings:
    """Settings for a local test run."""
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        environment="test",
        referral_base_url="https://candiez.shop/",
    )


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """In-memory database with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Session with the default tiers already seeded."""
    session_maker = async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_maker() as session:
        await TierCatalogService(session).seed_default_tiers()
        yield session


@pytest.fixture
def service(session: AsyncSession, settings: Settings) -> AmbassadorService:
    """Ambassador service facade."""
    return AmbassadorService(session, settings=settings)


@pytest.fixture
def ledger(session: AsyncSession) -> LedgerBalanceManager:
    return LedgerBalanceManager(session)


@pytest.fixture
def make_ambassador(
    session: AsyncSession,
) -> Callable[..., Awaitable[Ambassador]]:
    """Factory enrolling ambassadors with sequential user ids."""
    enrollment = AmbassadorEnrollment(session)
    counter = {"user_id": 1000}

    async def _make(
        first_name: str = "Admin",
        last_name: str = "User",
        user_id: int | None = None,
    ) -> Ambassador:
        if user_id is None:
            counter["user_id"] += 1
            user_id = counter["user_id"]
        return await enrollment.enroll(user_id, first_name, last_name)

    return _make


@pytest.fixture
def fund(
    ledger: LedgerBalanceManager,
) -> Callable[[int, Decimal], Awaitable[None]]:
    """Credit an ambassador directly through the ledger."""
    counter = {"transaction_id": 90_000}

    async def _fund(ambassador_id: int, amount: Decimal) -> None:
        counter["transaction_id"] += 1
        await ledger.apply_accrual(
            ambassador_id,
            amount,
            related_transaction_id=counter["transaction_id"],
        )

    return _fund
