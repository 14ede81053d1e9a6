"""Pytest configuration and shared fixtures for all tests."""

import os

# Minimal environment for Settings(); must be set before engine imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("REFERRAL_BASE_URL", "https://candiez.shop")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest
from loguru import logger


@pytest.fixture
def log_records():
    """Capture loguru records emitted during a test."""
    records = []
    handler_id = logger.add(
        lambda message: records.append(message.record), level="DEBUG"
    )
    yield records
    logger.remove(handler_id)
