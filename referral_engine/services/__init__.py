"""
Services.

Business logic of the ambassador program.
"""

from referral_engine.services.ambassador_service import AmbassadorService
from referral_engine.services.base_service import (
    BaseService,
    log_operation,
    transaction,
)


__all__ = [
    "AmbassadorService",
    "BaseService",
    "transaction",
    "log_operation",
]
