"""Database engine and session factory for the referral engine."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from referral_engine.config.settings import Settings, get_settings


_session_maker: async_sessionmaker[AsyncSession] | None = None


def create_engine_from_settings(settings: Settings | None = None) -> AsyncEngine:
    """Create an async engine from application settings."""
    settings = settings or get_settings()

    if settings.database_url.startswith("sqlite"):
        return create_async_engine(
            settings.database_url,
            echo=settings.database_echo,
        )

    return create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        poolclass=NullPool,
    )


def create_session_maker(
    engine: AsyncEngine | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Create a session maker bound to ``engine``."""
    if engine is None:
        engine = create_engine_from_settings()
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get the shared session maker, creating it on first use."""
    global _session_maker
    if _session_maker is None:
        _session_maker = create_session_maker()
    return _session_maker
