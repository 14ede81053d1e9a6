"""
Logging setup.

Configures the loguru logger for processes that embed the engine.
"""

import sys

from loguru import logger

from referral_engine.config.settings import Settings, get_settings


def setup_logging(settings: Settings | None = None) -> None:
    """Configure stderr logging and the optional rotating file sink."""
    settings = settings or get_settings()

    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)

    if settings.log_file:
        logger.add(
            settings.log_file,
            rotation="1 day",
            retention="7 days",
            level=settings.log_level,
            encoding="utf-8",
        )

    logger.info(
        "Referral engine logging configured",
        extra={
            "environment": settings.environment,
            "log_level": settings.log_level,
        },
    )
