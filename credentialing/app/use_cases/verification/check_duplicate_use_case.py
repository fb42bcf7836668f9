"""
Check Duplicate Use Case

Tells an applicant, before registering, whether their email or phone
number is already taken.
"""

from typing import Optional

from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.libs.result import Error, Result, Return

from .dtos import DuplicateCheckResponse


class CheckDuplicateUseCase:
    """
    Use case for pre-registration duplicate checks.

    Business Rules:
    - At least one of email or phone must be given
    - A value is taken if an Identity holds it, or a non-rejected application does
    - Rejected applications never block resubmission
    - Read-only; nothing is written
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, email: Optional[str] = None, phone_number: Optional[str] = None
    ) -> Result[DuplicateCheckResponse]:
        """
        Execute check duplicate use case.

        Args:
            email: Email to check (case-insensitive)
            phone_number: Phone number to check

        Returns:
            Result with DuplicateCheckResponse, or Error(VALIDATION_ERROR)
        """
        if not email and not phone_number:
            return Return.err(
                Error("VALIDATION_ERROR", "Email or phone number is required")
            )

        async with self.uow:
            email_exists = False
            if email:
                email = email.strip().lower()
                email_exists = (
                    await self.uow.identities.get_by_email(email) is not None
                    or await self.uow.applications.find_open_by_email(email) is not None
                )

            phone_exists = False
            if phone_number:
                phone_exists = (
                    await self.uow.identities.get_by_phone(phone_number) is not None
                    or await self.uow.applications.find_open_by_phone(phone_number) is not None
                )

        if email_exists and phone_exists:
            message = "Both email and phone number are already registered"
        elif email_exists:
            message = "Email address is already registered"
        elif phone_exists:
            message = "Phone number is already registered"
        else:
            message = "Email and phone number are available"

        return Return.ok(
            DuplicateCheckResponse(
                email_exists=email_exists, phone_exists=phone_exists, message=message
            )
        )
