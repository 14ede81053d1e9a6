"""
Base service class.

Every ambassador program service shares one session per request and a
loguru logger bound to its class name. Write operations are wrapped in
``@transaction``; facade calls are timed with ``@log_operation``.
"""

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from referral_engine.utils.exceptions import AmbassadorProgramError


# Type variable for generic decorator return types
T = TypeVar("T")

# Session.info key holding the nesting depth of @transaction calls
_TRANSACTION_DEPTH = "referral_engine.transaction_depth"


class BaseService:
    """
    Base service class.

    Components built on the same session (ledger, tiers, payouts) can call
    each other freely: their ``@transaction`` methods join the caller's
    unit of work instead of committing on their own.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize base service.

        Args:
            session: Async database session
        """
        self.session = session
        self.logger = logger.bind(service=self.__class__.__name__)


def transaction(func: Callable[..., T]) -> Callable[..., T]:
    """
    Run a service method as one unit of work.

    The outermost decorated call on a session commits on success and rolls
    back on any exception; nested calls only track depth. Program errors
    (bad input, insufficient balance, bad transition) are logged as
    warnings, anything else as an error with traceback.

    Usage:
        @transaction
        async def apply_accrual(self, ambassador_id, amount, ...):
            ...

    Args:
        func: Async method to wrap

    Returns:
        Wrapped async method
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> Any:
        info = self.session.info
        depth = info.get(_TRANSACTION_DEPTH, 0)
        outermost = depth == 0
        info[_TRANSACTION_DEPTH] = depth + 1
        try:
            result = await func(self, *args, **kwargs)
            if outermost:
                await self.session.commit()
            return result
        except AmbassadorProgramError as e:
            if outermost:
                await self.session.rollback()
                self.logger.warning(
                    f"{func.__name__} rejected",
                    extra={
                        "function": func.__name__,
                        "error": e.message,
                        "error_code": e.error_code,
                    },
                )
            raise
        except Exception as e:
            if outermost:
                await self.session.rollback()
                self.logger.opt(exception=e).error(
                    f"{func.__name__} failed, transaction rolled back",
                    extra={"function": func.__name__, "error": str(e)},
                )
            raise
        finally:
            info[_TRANSACTION_DEPTH] = depth

    return wrapper


def log_operation(func: Callable[..., T]) -> Callable[..., T]:
    """
    Log a facade call at DEBUG with its duration and outcome.

    Usage:
        @log_operation
        async def on_purchase_completed(self, ambassador_id, ...):
            ...
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> Any:
        started = time.perf_counter()
        success = False
        try:
            result = await func(self, *args, **kwargs)
            success = True
            return result
        finally:
            self.logger.debug(
                f"{func.__name__} {'completed' if success else 'failed'}",
                extra={
                    "function": func.__name__,
                    "duration_seconds": round(time.perf_counter() - started, 3),
                    "success": success,
                },
            )

    return wrapper
