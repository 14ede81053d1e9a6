#!/usr/bin/env python3
"""Initialize ambassador program tables and seed the default tier ladder."""

import asyncio
import sys

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from referral_engine.config.settings import get_settings
from referral_engine.database import (
    create_engine_from_settings,
    create_session_maker,
)
from referral_engine.models import Base
from referral_engine.services.ambassador import TierCatalogService

# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO")


async def init_database() -> None:
    """Create all tables and insert missing default tiers."""
    settings = get_settings()

    logger.info("Connecting to database...")
    engine = create_engine_from_settings(settings)

    try:
        async with engine.begin() as conn:
            logger.info("Creating tables (checkfirst=True)...")
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)

        session_maker = create_session_maker(engine)
        async with session_maker() as session:
            created = await TierCatalogService(session).seed_default_tiers()
            logger.info(f"Default tiers seeded: {created} created")
    except SQLAlchemyError as e:
        logger.error(f"Database initialization failed: {e}")
        sys.exit(1)
    finally:
        await engine.dispose()

    logger.success("Database initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init_database())
