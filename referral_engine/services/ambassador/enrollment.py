"""
Ambassador enrollment.

Creates ambassador rows and issues their referral codes.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from commission import CommissionError, generate_code, normalize_code
from referral_engine.models.ambassador import Ambassador
from referral_engine.repositories.ambassador_repository import (
    AmbassadorRepository,
)
from referral_engine.services.base_service import BaseService, transaction
from referral_engine.utils.exceptions import (
    InvalidNameError,
    NotFoundError,
    to_engine_error,
)


class AmbassadorEnrollment(BaseService):
    """Enrolls POS users and resolves typed referral codes."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize enrollment service.

        Args:
            session: Async database session
        """
        super().__init__(session)
        self.ambassador_repo = AmbassadorRepository(session)

    @transaction
    async def enroll(
        self, user_id: int, first_name: str, last_name: str
    ) -> Ambassador:
        """
        Enroll a POS user and issue their referral code.

        The code is derived from the names and the new row's id, so it is
        unique without a retry loop. Enrolling the same user again returns
        the existing ambassador unchanged.

        Args:
            user_id: POS user ID
            first_name: First name
            last_name: Last name

        Returns:
            Ambassador with its referral code

        Raises:
            InvalidNameError: Both names empty
        """
        existing = await self.ambassador_repo.get_by_user_id(user_id)
        if existing is not None:
            return existing

        first = (first_name or "").strip()
        last = (last_name or "").strip()
        if not first and not last:
            raise InvalidNameError("Ambassador needs a first or last name")

        ambassador = await self.ambassador_repo.create(
            user_id=user_id, first_name=first, last_name=last
        )
        try:
            ambassador.referral_code = generate_code(first, last, ambassador.id)
        except CommissionError as e:
            raise to_engine_error(e) from e
        await self.session.flush()

        self.logger.info(
            "Ambassador enrolled",
            extra={
                "ambassador_id": ambassador.id,
                "user_id": user_id,
                "referral_code": ambassador.referral_code,
            },
        )
        return ambassador

    async def get_ambassador(self, ambassador_id: int) -> Ambassador:
        """
        Get ambassador by ID.

        Raises:
            NotFoundError: Unknown ambassador
        """
        ambassador = await self.ambassador_repo.get_by_id(ambassador_id)
        if ambassador is None:
            raise NotFoundError(f"Ambassador not found: {ambassador_id}")
        return ambassador

    async def find_by_code(self, code: str) -> Ambassador:
        """
        Resolve a typed referral code to an active ambassador.

        Args:
            code: Code as typed at signup (case and whitespace ignored)

        Returns:
            Matching active ambassador

        Raises:
            NotFoundError: No active ambassador has this code
        """
        normalized = normalize_code(code)
        ambassador = None
        if normalized:
            ambassador = await self.ambassador_repo.get_by_code(normalized)
        if ambassador is None:
            raise NotFoundError(f"Referral code not found: {code!r}")
        return ambassador

    @transaction
    async def set_active(self, ambassador_id: int, is_active: bool) -> Ambassador:
        """
        Activate or deactivate an ambassador.

        Deactivated ambassadors keep their ledger and balance, but their
        code no longer resolves.
        """
        ambassador = await self.ambassador_repo.get_for_update(ambassador_id)
        if ambassador is None:
            raise NotFoundError(f"Ambassador not found: {ambassador_id}")

        ambassador.is_active = is_active
        await self.session.flush()

        self.logger.info(
            "Ambassador activation changed",
            extra={"ambassador_id": ambassador_id, "is_active": is_active},
        )
        return ambassador
