"""
ProvisionalApplication Entity

Staging record for an applicant who has not been verified yet.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import BackgroundCheckStatus, WorkflowState


class ProvisionalApplication(SQLModel, table=True):
    """
    ProvisionalApplication entity - one row per applicant submission.

    Business Rules:
    - workflow_state alone holds the current stage; registration_status is derived from it
    - Overwritten in place only while workflow_state=registration_submitted
    - Read-only once approved or rejected
    - A resubmission after rejection is a new row with the next submission_number
    """

    __tablename__ = "provisional_applications"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    # External identity provider subject
    external_subject_id: str = Field(max_length=255, nullable=False, index=True)
    external_subject_type: str = Field(default="cognito", max_length=50)
    submission_number: int = Field(default=1)

    # Personal information
    email: str = Field(max_length=255, index=True)
    phone_number: Optional[str] = Field(default=None, max_length=20, index=True)
    phone_country_code: Optional[str] = Field(default=None, max_length=10)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(default=None, max_length=50)

    # Address
    address_line1: Optional[str] = Field(default=None, max_length=255)
    address_line2: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    zip_code: Optional[str] = Field(default=None, max_length=20)
    country: Optional[str] = Field(default=None, max_length=100)
    timezone: Optional[str] = Field(default=None, max_length=100)

    # Profile
    languages_spoken: Optional[list] = Field(default=None, sa_column=Column(JSON))
    profile_photo_url: Optional[str] = None
    selected_avatar_url: Optional[str] = None
    headshot_url: Optional[str] = None

    # Professional
    degree: Optional[str] = Field(default=None, max_length=100)
    institution_name: Optional[str] = Field(default=None, max_length=255)
    graduation_year: Optional[int] = None
    years_of_experience: Optional[int] = None
    bio: Optional[str] = None
    specializations: Optional[list] = Field(default=None, sa_column=Column(JSON))

    # Specialties and modalities
    clinical_specialties: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    life_context_specialties: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    therapeutic_modalities: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    personal_style: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    demographic_preferences: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # License
    license_number: str = Field(max_length=100)
    license_state: str = Field(max_length=50)
    license_type: Optional[str] = Field(default=None, max_length=100)
    license_expiry: Optional[date] = None
    license_document_url: Optional[str] = None
    npi_number: Optional[str] = Field(default=None, max_length=20)
    licensing_authority: Optional[str] = Field(default=None, max_length=255)

    # Malpractice insurance
    malpractice_insurance_provider: Optional[str] = Field(default=None, max_length=255)
    malpractice_policy_number: Optional[str] = Field(default=None, max_length=100)
    malpractice_expiry: Optional[date] = None
    malpractice_document_url: Optional[str] = None

    # Documents (opaque storage URLs)
    degree_certificate_url: Optional[str] = None
    photo_id_url: Optional[str] = None
    w9_document_url: Optional[str] = None
    hipaa_document_url: Optional[str] = None
    ethics_document_url: Optional[str] = None
    background_check_document_url: Optional[str] = None

    # Practice logistics
    session_formats: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    new_clients_capacity: Optional[int] = None
    max_caseload_capacity: Optional[int] = None
    client_intake_speed: Optional[str] = Field(default=None, max_length=50)
    emergency_same_day_capacity: Optional[bool] = None
    preferred_scheduling_density: Optional[str] = Field(default=None, max_length=50)
    weekly_schedule: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    session_durations: Optional[list] = Field(default=None, sa_column=Column(JSON))

    # Insurance panels and payment options
    insurance_panels_accepted: Optional[list] = Field(default=None, sa_column=Column(JSON))
    medicaid_acceptance: Optional[bool] = None
    medicare_acceptance: Optional[bool] = None
    self_pay_accepted: Optional[bool] = None
    sliding_scale: Optional[bool] = None
    employer_eaps: Optional[list] = Field(default=None, sa_column=Column(JSON))

    # Compliance flags
    hipaa_training_completed: Optional[bool] = None
    ethics_certification: Optional[bool] = None
    signed_baa: Optional[bool] = None
    background_check_consent: bool = Field(default=False)
    background_check_consent_date: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Profile content
    short_bio: Optional[str] = None
    extended_bio: Optional[str] = None
    what_clients_can_expect: Optional[str] = None
    my_approach_to_therapy: Optional[str] = None

    # Workflow
    workflow_state: WorkflowState = Field(default=WorkflowState.registration_submitted)
    # Source state of the most recent transition, written by the same UPDATE
    previous_workflow_state: Optional[WorkflowState] = Field(default=None)
    background_check_status: BackgroundCheckStatus = Field(
        default=BackgroundCheckStatus.not_started
    )
    background_check_requested_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    approved_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    approved_by: Optional[str] = Field(default=None, max_length=255)
    rejected_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    rejected_by: Optional[str] = Field(default=None, max_length=255)
    rejection_reason: Optional[str] = None

    # Set once the application has been migrated into production
    identity_id: Optional[UUID] = Field(default=None, foreign_key="identities.id")

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint(
            "external_subject_id", "submission_number", name="uq_application_submission"
        ),
        Index("idx_application_workflow_state", "workflow_state"),
        Index("idx_application_license", "license_number", "license_state"),
        Index("idx_application_created_at", "created_at"),
    )

    @property
    def registration_status(self) -> str:
        return self.workflow_state.registration_label

    @property
    def is_terminal(self) -> bool:
        return self.workflow_state.is_terminal
