"""
Activation Transaction

Migrates an approved application into production Identity,
ProfessionalProfile and VerificationRecord rows. Runs inside the
caller's UnitOfWork and never commits on its own; the caller commits
the claim and the activation together or not at all.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from credentialing.app.services.audit_trail import AuditTrail
from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.base import utcnow
from credentialing.domain.context import Principal, RequestContext
from credentialing.domain.entities import (
    ActorType,
    BackgroundCheckStatus,
    ComplianceLevel,
    Identity,
    IdentityStatus,
    ProfessionalProfile,
    ProvisionalApplication,
    RoleAssignment,
    VerificationRecord,
    WorkflowState,
)
from credentialing.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

# Application fields copied onto the profile, grouped for the audit log
PROFILE_FIELD_GROUPS = {
    "personal": (
        "phone_country_code",
        "date_of_birth",
        "gender",
        "timezone",
        "languages_spoken",
        "profile_photo_url",
        "selected_avatar_url",
        "headshot_url",
    ),
    "address": (
        "address_line1",
        "address_line2",
        "city",
        "state",
        "zip_code",
        "country",
    ),
    "professional": (
        "institution_name",
        "graduation_year",
        "years_of_experience",
        "bio",
    ),
    "specialties": (
        "clinical_specialties",
        "life_context_specialties",
        "therapeutic_modalities",
        "personal_style",
        "demographic_preferences",
    ),
    "practice": (
        "session_formats",
        "new_clients_capacity",
        "max_caseload_capacity",
        "client_intake_speed",
        "emergency_same_day_capacity",
        "preferred_scheduling_density",
        "weekly_schedule",
        "session_durations",
    ),
    "insurance": (
        "insurance_panels_accepted",
        "medicaid_acceptance",
        "medicare_acceptance",
        "self_pay_accepted",
        "sliding_scale",
        "employer_eaps",
    ),
    "compliance": (
        "hipaa_training_completed",
        "ethics_certification",
        "signed_baa",
        "background_check_consent",
        "w9_document_url",
        "hipaa_document_url",
        "ethics_document_url",
        "background_check_document_url",
    ),
    "content": (
        "short_bio",
        "extended_bio",
        "what_clients_can_expect",
        "my_approach_to_therapy",
    ),
}

# Application fields copied onto the verification record
VERIFICATION_FIELD_GROUPS = {
    "license": (
        "license_number",
        "license_state",
        "license_type",
        "license_expiry",
        "license_document_url",
        "npi_number",
        "licensing_authority",
    ),
    "malpractice": (
        "malpractice_insurance_provider",
        "malpractice_policy_number",
        "malpractice_expiry",
        "malpractice_document_url",
    ),
    "education": (
        "degree",
        "degree_certificate_url",
        "photo_id_url",
        "specializations",
    ),
}

LIST_FIELDS = frozenset(
    {
        "languages_spoken",
        "session_durations",
        "insurance_panels_accepted",
        "employer_eaps",
        "specializations",
    }
)
DICT_FIELDS = frozenset(
    {
        "clinical_specialties",
        "life_context_specialties",
        "therapeutic_modalities",
        "personal_style",
        "demographic_preferences",
        "session_formats",
        "weekly_schedule",
    }
)


def _copy_value(application: ProvisionalApplication, field_name: str):
    value = getattr(application, field_name)
    if value is None and field_name in LIST_FIELDS:
        return []
    if value is None and field_name in DICT_FIELDS:
        return {}
    return value


@dataclass
class Activation:
    """Rows produced by a successful activation"""

    identity: Identity
    profile: ProfessionalProfile
    verification_record: VerificationRecord


class ActivationTransaction:
    """
    Activates an application that has already been claimed as approved.

    Business Rules:
    - Identity is keyed by (external_subject_id, external_subject_type)
    - Profile and verification record are keyed by identity id
    - Every step is an upsert, so re-running for the same application is safe
    - An email held by a different identity aborts with IDENTITY_CONFLICT
    - Unset multi-valued fields become empty collections
    - Unset timezone, country and phone country code fall back to configured defaults
    """

    def __init__(self, uow: UnitOfWork, config):
        self.uow = uow
        self.config = config
        self.audit = AuditTrail(uow)

    async def activate(
        self,
        application: ProvisionalApplication,
        approver: Principal,
        previous_state: WorkflowState,
        context: Optional[RequestContext] = None,
    ) -> Result[Activation]:
        now = utcnow()

        # Step 1: identity and role
        identity_result = await self._upsert_identity(application, now)
        if identity_result.is_err():
            return identity_result
        identity, previous_identity_status = identity_result.value
        await self._grant_activation_role(identity, approver)

        # Step 2: profile
        profile = await self._upsert_profile(application, identity)

        # Step 3: verification record
        record = await self._upsert_verification_record(application, identity, approver, now)

        # Step 4: finalize the staging row
        await self._finalize_application(application, identity, approver, now)

        # Step 5: audit
        fields_migrated = list(PROFILE_FIELD_GROUPS) + list(VERIFICATION_FIELD_GROUPS)
        await self.audit.record_workflow(
            stage=WorkflowState.approved.value,
            action="account_activated",
            application_id=application.id,
            identity_id=identity.id,
            actor_type=ActorType.admin,
            actor=approver,
            details={
                "fields_migrated": fields_migrated,
                "profile_id": str(profile.id),
                "verification_record_id": str(record.id),
            },
        )
        await self.audit.record_compliance(
            action="account_activated",
            resource_type="identity",
            resource_id=str(identity.id),
            old_values={
                "application_status": previous_state.registration_label,
                "identity_status": previous_identity_status,
            },
            new_values={
                "application_status": WorkflowState.approved.registration_label,
                "identity_status": IdentityStatus.active.value,
            },
            actor_type=ActorType.admin,
            actor=approver,
            context=context,
            compliance_level=ComplianceLevel.critical,
        )

        logger.info(
            f"Activated application {application.id} as identity {identity.id}"
        )
        return Return.ok(Activation(identity=identity, profile=profile, verification_record=record))

    async def _upsert_identity(
        self, application: ProvisionalApplication, now: datetime
    ) -> Result[Tuple[Identity, Optional[str]]]:
        identity = await self.uow.identities.get_by_subject(
            application.external_subject_id, application.external_subject_type
        )

        holder = await self.uow.identities.get_by_email(application.email)
        if holder is not None and (identity is None or holder.id != identity.id):
            return Return.err(
                Error(
                    "IDENTITY_CONFLICT",
                    "Email is already registered to another account",
                )
            )

        profile_image_url = application.headshot_url or application.profile_photo_url

        if identity is None:
            identity = Identity(
                external_subject_id=application.external_subject_id,
                external_subject_type=application.external_subject_type,
                email=application.email,
                phone_number=application.phone_number,
                first_name=application.first_name,
                last_name=application.last_name,
                status=IdentityStatus.active,
                verified=True,
                verified_at=now,
                primary_role=self.config.ACTIVATION_ROLE,
                profile_image_url=profile_image_url,
            )
            return Return.ok((await self.uow.identities.create(identity), None))

        previous_status = identity.status.value
        identity.email = application.email
        identity.phone_number = application.phone_number or identity.phone_number
        identity.first_name = application.first_name
        identity.last_name = application.last_name
        identity.profile_image_url = profile_image_url or identity.profile_image_url
        identity.status = IdentityStatus.active
        identity.verified = True
        identity.verified_at = identity.verified_at or now
        identity.updated_at = now
        return Return.ok((await self.uow.identities.update(identity), previous_status))

    async def _grant_activation_role(self, identity: Identity, approver: Principal) -> None:
        role = await self.uow.rbac.get_role_by_name(self.config.ACTIVATION_ROLE)
        if role is None:
            logger.warning(f"Role {self.config.ACTIVATION_ROLE} not seeded; skipping grant")
            return

        assignment = await self.uow.rbac.get_assignment(identity.id, role.id)
        if assignment is None:
            await self.uow.rbac.save_assignment(
                RoleAssignment(
                    identity_id=identity.id,
                    role_id=role.id,
                    assigned_by=approver.subject_id,
                )
            )

    async def _upsert_profile(
        self, application: ProvisionalApplication, identity: Identity
    ) -> ProfessionalProfile:
        profile = await self.uow.profiles.get_by_identity_id(identity.id)
        is_new = profile is None
        if is_new:
            profile = ProfessionalProfile(identity_id=identity.id)

        for fields in PROFILE_FIELD_GROUPS.values():
            for field_name in fields:
                setattr(profile, field_name, _copy_value(application, field_name))

        profile.timezone = profile.timezone or self.config.DEFAULT_TIMEZONE
        profile.country = profile.country or self.config.DEFAULT_COUNTRY
        profile.phone_country_code = (
            profile.phone_country_code or self.config.DEFAULT_PHONE_COUNTRY_CODE
        )

        if is_new:
            return await self.uow.profiles.create(profile)
        return await self.uow.profiles.update(profile)

    async def _upsert_verification_record(
        self,
        application: ProvisionalApplication,
        identity: Identity,
        approver: Principal,
        now: datetime,
    ) -> VerificationRecord:
        record = await self.uow.verification_records.get_by_identity_id(identity.id)
        is_new = record is None
        if is_new:
            record = VerificationRecord(
                identity_id=identity.id,
                license_number=application.license_number,
                license_state=application.license_state,
            )

        for fields in VERIFICATION_FIELD_GROUPS.values():
            for field_name in fields:
                setattr(record, field_name, _copy_value(application, field_name))

        record.license_verified = True
        record.verification_status = "approved"
        record.background_check_status = BackgroundCheckStatus.completed.value
        record.background_check_result = {
            "criminal": "clear",
            "references": "verified",
            "education": "verified",
            "license": "verified",
            "approved_by": approver.subject_id,
            "approved_at": now.isoformat(),
        }
        record.reviewed_at = now
        record.approved_by = approver.subject_id

        if is_new:
            return await self.uow.verification_records.create(record)
        return await self.uow.verification_records.update(record)

    async def _finalize_application(
        self,
        application: ProvisionalApplication,
        identity: Identity,
        approver: Principal,
        now: datetime,
    ) -> ProvisionalApplication:
        application.approved_at = now
        application.approved_by = approver.subject_id
        application.identity_id = identity.id
        application.background_check_status = BackgroundCheckStatus.completed
        return await self.uow.applications.update(application)
