"""
List Pending Applications Use Case

Review queue for admins.
"""

from typing import Optional

from credentialing.app.services.permission_gate import PermissionGate
from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.context import Principal
from credentialing.domain.entities import TERMINAL_STATES, WorkflowState
from credentialing.libs.result import Error, Result, Return

from .dtos import PendingApplicationSummary, PendingApplicationsResponse


class ListPendingApplicationsUseCase:
    """
    Use case for listing applications awaiting review.

    Business Rules:
    - Caller needs therapists.read
    - Only non-terminal applications, oldest first
    - Optional filter by a single non-terminal stage
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        principal: Principal,
        state: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Result[PendingApplicationsResponse]:
        stage = None
        if state:
            invalid = Error("VALIDATION_ERROR", f"Invalid pending stage: {state}")
            try:
                stage = WorkflowState(state)
            except ValueError:
                return Return.err(invalid)
            if stage in TERMINAL_STATES:
                return Return.err(invalid)

        async with self.uow:
            authorized = await PermissionGate(self.uow).authorize(principal, "therapists.read")
            if authorized.is_err():
                return authorized

            applications, total = await self.uow.applications.list_pending(stage, limit, offset)

            return Return.ok(
                PendingApplicationsResponse(
                    applications=[
                        PendingApplicationSummary(
                            id=str(application.id),
                            external_subject_id=application.external_subject_id,
                            submission_number=application.submission_number,
                            email=application.email,
                            first_name=application.first_name,
                            last_name=application.last_name,
                            license_number=application.license_number,
                            license_state=application.license_state,
                            status=application.registration_status,
                            workflow_stage=application.workflow_state.value,
                            background_check_status=application.background_check_status.value,
                            created_at=application.created_at,
                        )
                        for application in applications
                    ],
                    total=total,
                    limit=limit,
                    offset=offset,
                )
            )
