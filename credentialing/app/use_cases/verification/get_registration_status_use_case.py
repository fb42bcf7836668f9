"""
Get Registration Status Use Case

Lets an applicant poll where their registration stands.
"""

from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.entities import IdentityStatus, WorkflowState
from credentialing.libs.result import Error, Result, Return

from .dtos import RegistrationStatusResponse

STATUS_MESSAGES = {
    WorkflowState.approved: "Your account has been approved. You can now login.",
    WorkflowState.rejected: "Your application was not approved. Please contact support.",
    WorkflowState.background_check: (
        "Background check in progress. This may take 2-5 business days."
    ),
    WorkflowState.documents_review: "Our team is reviewing your documents.",
    WorkflowState.final_review: "Final review in progress.",
    WorkflowState.registration_submitted: (
        "Your application is under review. We will notify you once it is processed."
    ),
}


class GetRegistrationStatusUseCase:
    """
    Use case for reading registration status by external subject.

    Business Rules:
    - An existing Identity wins over any application; can_login iff it is active
    - Otherwise the latest submission is reported with its human-readable message
    - Unknown subject: REGISTRATION_NOT_FOUND
    """

    def __init__(self, uow: UnitOfWork, config):
        self.uow = uow
        self.config = config

    async def execute(self, external_subject_id: str) -> Result[RegistrationStatusResponse]:
        async with self.uow:
            identity = await self.uow.identities.get_by_subject(
                external_subject_id, self.config.EXTERNAL_SUBJECT_TYPE
            )
            if identity is not None:
                is_active = identity.status == IdentityStatus.active
                return Return.ok(
                    RegistrationStatusResponse(
                        external_subject_id=external_subject_id,
                        status=identity.status.value,
                        identity_id=str(identity.id),
                        can_login=is_active,
                        message=(
                            "Your account is active. You can login."
                            if is_active
                            else "Your account is not active. Please contact support."
                        ),
                    )
                )

            application = await self.uow.applications.get_latest_for_subject(external_subject_id)
            if application is None:
                return Return.err(
                    Error(
                        "REGISTRATION_NOT_FOUND",
                        "No registration found. Please register first.",
                    )
                )

            return Return.ok(
                RegistrationStatusResponse(
                    external_subject_id=external_subject_id,
                    status=application.registration_status,
                    workflow_stage=application.workflow_state.value,
                    background_check_status=application.background_check_status.value,
                    application_id=str(application.id),
                    identity_id=str(application.identity_id) if application.identity_id else None,
                    can_login=application.workflow_state == WorkflowState.approved,
                    message=STATUS_MESSAGES[application.workflow_state],
                )
            )
