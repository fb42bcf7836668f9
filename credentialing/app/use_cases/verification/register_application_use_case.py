"""
Register Application Use Case

Intake of a prospective professional into the provisional store.
"""

import logging
from datetime import date
from typing import Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from credentialing.app.services.audit_trail import AuditTrail
from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.app.use_cases.organizations.dtos import InviteApplicant
from credentialing.app.use_cases.organizations.redeem_invite_use_case import (
    RedeemInviteUseCase,
)
from credentialing.domain.base import utcnow
from credentialing.domain.context import Principal, RequestContext
from credentialing.domain.entities import (
    ActorType,
    ComplianceLevel,
    ProvisionalApplication,
    WorkflowState,
)
from credentialing.libs.result import Error, Result, Return

from .dtos import (
    ApplicationPayload,
    InviteRegistrationCommand,
    RegisterApplicationCommand,
    RegistrationResponse,
)

logger = logging.getLogger(__name__)

PAYLOAD_FIELDS = frozenset(ApplicationPayload.model_fields)

DUPLICATE_REGISTRATION = Error(
    "DUPLICATE_REGISTRATION", "A registration with these details already exists"
)


class RegisterApplicationUseCase:
    """
    Use case for submitting a professional registration.

    Business Rules:
    - With an org invite code the applicant is activated through the invite fast path
    - First submission, or resubmission after rejection: new row, next submission_number
    - Latest submission still registration_submitted: overwritten in place
    - Latest submission approved: APPLICATION_ALREADY_APPROVED
    - Latest submission under review: APPLICATION_UNDER_REVIEW
    - Email, phone or license held by another subject: DUPLICATE_REGISTRATION
    - Missing license/malpractice expiry falls back to the configured default
    - Writes a workflow log entry and a PII compliance entry
    """

    def __init__(self, uow: UnitOfWork, config):
        self.uow = uow
        self.config = config

    async def execute(
        self,
        command: Union[RegisterApplicationCommand, InviteRegistrationCommand],
        context: Optional[RequestContext] = None,
    ) -> Result[RegistrationResponse]:
        """
        Execute register application use case.

        Args:
            command: Validated registration payload, or an invite registration
            context: Request origin for the compliance log

        Returns:
            Result with RegistrationResponse, or Error
        """
        if isinstance(command, InviteRegistrationCommand):
            return await self._register_with_invite(command, context)

        async with self.uow:
            try:
                result = await self._register(command, context)
                if result.is_err():
                    return result
                await self.uow.commit()
            except IntegrityError as exc:
                # Lost a race against a concurrent registration of the same data
                await self.uow.rollback()
                logger.warning(f"Registration conflicted: {exc.orig}")
                return Return.err(DUPLICATE_REGISTRATION)
            except SQLAlchemyError as exc:
                await self.uow.rollback()
                logger.error(f"Registration failed: {exc}")
                return Return.err(
                    Error(
                        "TRANSIENT_STORAGE_ERROR",
                        "Storage temporarily unavailable, please retry",
                    )
                )

        logger.info(
            f"Registration {'created' if result.value.created else 'updated'} "
            f"for {command.external_subject_id}"
        )
        return result

    async def _register(
        self, command: RegisterApplicationCommand, context: Optional[RequestContext]
    ) -> Result[RegistrationResponse]:
        subject_id = command.external_subject_id
        subject_type = self.config.EXTERNAL_SUBJECT_TYPE

        if await self.uow.identities.get_by_subject(subject_id, subject_type) is not None:
            return Return.err(
                Error("APPLICATION_ALREADY_APPROVED", "Account is already active")
            )

        latest = await self.uow.applications.get_latest_for_subject(subject_id)
        if latest is not None:
            if latest.workflow_state == WorkflowState.approved:
                return Return.err(
                    Error("APPLICATION_ALREADY_APPROVED", "Application is already approved")
                )
            if latest.workflow_state not in (
                WorkflowState.registration_submitted,
                WorkflowState.rejected,
            ):
                return Return.err(
                    Error(
                        "APPLICATION_UNDER_REVIEW",
                        "Application is under review and can no longer be changed",
                        {"workflow_stage": latest.workflow_state.value},
                    )
                )

        duplicate = await self._find_duplicate(command)
        if duplicate is not None:
            return Return.err(duplicate)

        values = command.model_dump(include=PAYLOAD_FIELDS)
        default_expiry = date.fromisoformat(self.config.DEFAULT_DOCUMENT_EXPIRY)
        values["license_expiry"] = values["license_expiry"] or default_expiry
        values["malpractice_expiry"] = values["malpractice_expiry"] or default_expiry

        now = utcnow()
        values["background_check_consent_date"] = now if command.background_check_consent else None

        if latest is not None and latest.workflow_state == WorkflowState.registration_submitted:
            for field_name, value in values.items():
                setattr(latest, field_name, value)
            application = await self.uow.applications.update(latest)
            created = False
        else:
            application = ProvisionalApplication(
                external_subject_id=subject_id,
                external_subject_type=subject_type,
                submission_number=latest.submission_number + 1 if latest else 1,
                **values,
            )
            application = await self.uow.applications.create(application)
            created = True

        action = "registration_created" if created else "registration_updated"
        applicant = Principal(subject_id, subject_type, application.email)
        audit = AuditTrail(self.uow)
        await audit.record_workflow(
            stage=application.workflow_state.value,
            action=action,
            application_id=application.id,
            actor_type=ActorType.applicant,
            actor=applicant,
            details={"submission_number": application.submission_number},
        )
        await audit.record_compliance(
            action=action,
            resource_type="provisional_application",
            resource_id=str(application.id),
            new_values={
                "email": application.email,
                "license_number": application.license_number,
                "license_state": application.license_state,
                "status": application.registration_status,
            },
            actor_type=ActorType.applicant,
            actor=applicant,
            context=context,
            compliance_level=ComplianceLevel.pii,
        )

        return Return.ok(
            RegistrationResponse(
                external_subject_id=subject_id,
                status=application.registration_status,
                workflow_stage=application.workflow_state.value,
                application_id=str(application.id),
                submission_number=application.submission_number,
                created=created,
                can_login=False,
                message=(
                    "Registration submitted successfully. "
                    "You will be notified once your application is reviewed."
                ),
            )
        )

    async def _find_duplicate(self, command: RegisterApplicationCommand) -> Optional[Error]:
        subject_id = command.external_subject_id

        holder = await self.uow.identities.get_by_email(command.email)
        if holder is not None and holder.external_subject_id != subject_id:
            return _duplicate("email")
        if await self.uow.applications.find_open_by_email(command.email, subject_id):
            return _duplicate("email")

        if command.phone_number:
            holder = await self.uow.identities.get_by_phone(command.phone_number)
            if holder is not None and holder.external_subject_id != subject_id:
                return _duplicate("phone_number")
            if await self.uow.applications.find_open_by_phone(command.phone_number, subject_id):
                return _duplicate("phone_number")

        if await self.uow.applications.find_open_by_license(
            command.license_number, command.license_state, subject_id
        ):
            return _duplicate("license")

        return None

    async def _register_with_invite(
        self, command: InviteRegistrationCommand, context: Optional[RequestContext]
    ) -> Result[RegistrationResponse]:
        applicant = InviteApplicant(
            external_subject_id=command.external_subject_id,
            email=command.email,
            first_name=command.first_name,
            last_name=command.last_name,
            phone_number=command.phone_number,
            profile_image_url=command.headshot_url or command.profile_photo_url,
        )
        result = await RedeemInviteUseCase(self.uow, self.config).execute(
            command.org_invite_code, applicant, context
        )
        if result.is_err():
            return result

        redeemed = result.value
        return Return.ok(
            RegistrationResponse(
                external_subject_id=command.external_subject_id,
                status=redeemed.status,
                identity_id=redeemed.identity_id,
                organization_id=redeemed.organization_id,
                created=True,
                can_login=True,
                message="Registration complete via organization invite!",
            )
        )


def _duplicate(field: str) -> Error:
    return Error(
        DUPLICATE_REGISTRATION.code,
        DUPLICATE_REGISTRATION.message,
        {"field": field},
    )
