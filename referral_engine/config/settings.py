"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from decimal import Decimal
from functools import lru_cache

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from referral_engine.config.business_constants import PAYOUT_TYPES


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Referral links
    referral_base_url: str = Field(
        default="http://localhost:5173",
        description="Public storefront URL used to build referral signup links",
    )

    # Payouts
    default_payout_type: str = Field(
        default="store_credit",
        description="Payout type used when a request does not name one",
    )
    min_payout_amount: Decimal = Field(
        default=Decimal("0.01"),
        gt=0,
        description="Smallest payout an ambassador may request",
    )

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str | None = Field(
        default=None,
        description="Optional log file path (rotated daily, kept 7 days)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production':
            # DEBUG must be False in production
            if self.debug:
                raise ValueError(
                    'DEBUG must be False in production environment. '
                    'Set DEBUG=false in your .env file.'
                )

            if not self.referral_base_url.startswith('https://'):
                raise ValueError(
                    'REFERRAL_BASE_URL must use https:// in production. '
                    'Referral links are shared publicly.'
                )

            if self.database_url.startswith('sqlite'):
                logger.warning(
                    'DATABASE_URL points to SQLite in production. '
                    'Row locks are not enforced on SQLite; use PostgreSQL.'
                )

        return self

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(
            ('postgresql://', 'postgresql+asyncpg://', 'sqlite+aiosqlite://')
        ):
            raise ValueError(
                'DATABASE_URL must start with postgresql://, '
                'postgresql+asyncpg:// or sqlite+aiosqlite://'
            )
        return v

    @field_validator('referral_base_url')
    @classmethod
    def validate_referral_base_url(cls, v: str) -> str:
        """Validate referral base URL."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError(
                f'Invalid REFERRAL_BASE_URL: {v}. '
                'Must start with http:// or https://'
            )
        return v.rstrip('/')

    @field_validator('default_payout_type')
    @classmethod
    def validate_default_payout_type(cls, v: str) -> str:
        """Validate default payout type."""
        if v not in PAYOUT_TYPES:
            raise ValueError(
                f'Invalid DEFAULT_PAYOUT_TYPE: {v}. '
                f'Expected one of: {", ".join(PAYOUT_TYPES)}'
            )
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level name."""
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings.

    Settings are loaded once, on first use, so importing the engine does
    not require a configured environment.
    """
    return Settings()
