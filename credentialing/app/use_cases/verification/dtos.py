"""
Verification Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the verification domain.
Inputs accept camelCase or snake_case keys; outputs serialize as camelCase.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import EmailStr, Field, field_validator

from ..common import CamelModel


# ============================================================================
# Command DTOs
# ============================================================================


class ApplicationPayload(CamelModel):
    """
    Registration payload of a prospective professional.

    Mirrors the staging columns of ProvisionalApplication.
    """

    # Personal information
    email: EmailStr
    phone_number: Optional[str] = Field(default=None, max_length=20)
    phone_country_code: Optional[str] = Field(default=None, max_length=10)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None

    # Address
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    timezone: Optional[str] = None

    # Profile
    languages_spoken: Optional[List[str]] = None
    profile_photo_url: Optional[str] = None
    selected_avatar_url: Optional[str] = None
    headshot_url: Optional[str] = None

    # Professional
    degree: Optional[str] = None
    institution_name: Optional[str] = None
    graduation_year: Optional[int] = Field(default=None, ge=1900, le=2100)
    years_of_experience: Optional[int] = Field(default=None, ge=0)
    bio: Optional[str] = None
    specializations: Optional[List[str]] = None

    # Specialties and modalities
    clinical_specialties: Optional[Dict[str, Any]] = None
    life_context_specialties: Optional[Dict[str, Any]] = None
    therapeutic_modalities: Optional[Dict[str, Any]] = None
    personal_style: Optional[Dict[str, Any]] = None
    demographic_preferences: Optional[Dict[str, Any]] = None

    # License
    license_number: str = Field(..., min_length=1, max_length=100)
    license_state: str = Field(..., min_length=1, max_length=50)
    license_type: Optional[str] = None
    license_expiry: Optional[date] = None
    license_document_url: Optional[str] = None
    npi_number: Optional[str] = Field(default=None, max_length=20)
    licensing_authority: Optional[str] = None

    # Malpractice insurance
    malpractice_insurance_provider: Optional[str] = None
    malpractice_policy_number: Optional[str] = None
    malpractice_expiry: Optional[date] = None
    malpractice_document_url: Optional[str] = None

    # Documents
    degree_certificate_url: Optional[str] = None
    photo_id_url: Optional[str] = None
    w9_document_url: Optional[str] = None
    hipaa_document_url: Optional[str] = None
    ethics_document_url: Optional[str] = None
    background_check_document_url: Optional[str] = None

    # Practice logistics
    session_formats: Optional[Dict[str, Any]] = None
    new_clients_capacity: Optional[int] = Field(default=None, ge=0)
    max_caseload_capacity: Optional[int] = Field(default=None, ge=0)
    client_intake_speed: Optional[str] = None
    emergency_same_day_capacity: Optional[bool] = None
    preferred_scheduling_density: Optional[str] = None
    weekly_schedule: Optional[Dict[str, Any]] = None
    session_durations: Optional[List[int]] = None

    # Insurance and payment
    insurance_panels_accepted: Optional[List[str]] = None
    medicaid_acceptance: Optional[bool] = None
    medicare_acceptance: Optional[bool] = None
    self_pay_accepted: Optional[bool] = None
    sliding_scale: Optional[bool] = None
    employer_eaps: Optional[List[str]] = None

    # Compliance
    hipaa_training_completed: Optional[bool] = None
    ethics_certification: Optional[bool] = None
    signed_baa: Optional[bool] = None
    background_check_consent: bool = False

    # Profile content
    short_bio: Optional[str] = None
    extended_bio: Optional[str] = None
    what_clients_can_expect: Optional[str] = None
    my_approach_to_therapy: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("license_number", "license_state", "first_name", "last_name")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class RegisterApplicationCommand(ApplicationPayload):
    """
    Register command - validated registration intent.

    external_subject_id is the identity provider subject of the applicant.
    """

    external_subject_id: str = Field(..., min_length=1, max_length=255)


class InviteRegistrationCommand(CamelModel):
    """
    Register command for the organization fast path.

    Invitees skip review, so only identity data is required; any other
    registration fields in the payload are ignored.
    """

    external_subject_id: str = Field(..., min_length=1, max_length=255)
    org_invite_code: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=20)
    headshot_url: Optional[str] = None
    profile_photo_url: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("org_invite_code", "first_name", "last_name")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


def parse_registration(
    payload: Dict[str, Any],
) -> Union[RegisterApplicationCommand, InviteRegistrationCommand]:
    """
    Validate a registration payload against the schema of its path.

    A non-empty orgInviteCode selects the invite fast path.

    Raises:
        pydantic.ValidationError: payload does not match the selected schema
    """
    if payload.get("orgInviteCode") or payload.get("org_invite_code"):
        return InviteRegistrationCommand.model_validate(payload)
    return RegisterApplicationCommand.model_validate(payload)


# ============================================================================
# Response DTOs
# ============================================================================


class DuplicateCheckResponse(CamelModel):
    """Response for check duplicate use case"""

    email_exists: bool
    phone_exists: bool
    message: str


class RegistrationResponse(CamelModel):
    """Response for register application use case"""

    external_subject_id: str
    status: str
    workflow_stage: Optional[str] = None
    application_id: Optional[str] = None
    submission_number: Optional[int] = None
    identity_id: Optional[str] = None
    organization_id: Optional[str] = None
    created: bool = True
    can_login: bool = False
    message: str


class RegistrationStatusResponse(CamelModel):
    """Response for registration status use case"""

    external_subject_id: str
    status: str
    workflow_stage: Optional[str] = None
    background_check_status: Optional[str] = None
    application_id: Optional[str] = None
    identity_id: Optional[str] = None
    can_login: bool
    message: str


class TransitionResponse(CamelModel):
    """Response for review pipeline transitions"""

    application_id: str
    previous_status: str
    status: str
    workflow_stage: str
    identity_id: Optional[str] = None
    already_applied: bool = False
    message: str


class PendingApplicationSummary(CamelModel):
    """One row of the pending review queue"""

    id: str
    external_subject_id: str
    submission_number: int
    email: str
    first_name: str
    last_name: str
    license_number: str
    license_state: str
    status: str
    workflow_stage: str
    background_check_status: str
    created_at: datetime


class PendingApplicationsResponse(CamelModel):
    """Response for list pending use case"""

    applications: List[PendingApplicationSummary]
    total: int
    limit: int
    offset: int


class DocumentResponse(CamelModel):
    """Uploaded verification document"""

    id: str
    application_id: str
    document_type: str
    file_url: str
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    expiry_date: Optional[date] = None
    status: str
    uploaded_by: str
    created_at: datetime


class HistoryEntry(CamelModel):
    """One workflow log entry"""

    id: int
    stage: str
    action: str
    outcome: str
    actor_type: str
    actor_id: Optional[str] = None
    identity_id: Optional[str] = None
    details: Dict[str, Any] = {}
    error_message: Optional[str] = None
    created_at: datetime


class ApplicationHistoryResponse(CamelModel):
    """Response for application history use case"""

    application_id: str
    entries: List[HistoryEntry]
    next_cursor: Optional[str] = None
