"""
ProfessionalProfile Entity

Public-facing practice profile of an activated professional.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, SQLModel

from ..base import utcnow


class ProfessionalProfile(SQLModel, table=True):
    """
    ProfessionalProfile entity - 1:1 with Identity.

    Business Rules:
    - identity_id is unique
    - Populated by account activation from the approved application
    - Multi-valued fields are never NULL after activation
    """

    __tablename__ = "professional_profiles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    identity_id: UUID = Field(foreign_key="identities.id", unique=True, nullable=False)

    # Personal
    phone_country_code: Optional[str] = Field(default=None, max_length=10)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(default=None, max_length=50)
    timezone: Optional[str] = Field(default=None, max_length=100)
    languages_spoken: Optional[list] = Field(default=None, sa_column=Column(JSON))
    profile_photo_url: Optional[str] = None
    selected_avatar_url: Optional[str] = None
    headshot_url: Optional[str] = None

    # Address
    address_line1: Optional[str] = Field(default=None, max_length=255)
    address_line2: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    zip_code: Optional[str] = Field(default=None, max_length=20)
    country: Optional[str] = Field(default=None, max_length=100)

    # Professional
    institution_name: Optional[str] = Field(default=None, max_length=255)
    graduation_year: Optional[int] = None
    years_of_experience: Optional[int] = None
    bio: Optional[str] = None

    # Clinical
    clinical_specialties: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    life_context_specialties: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    therapeutic_modalities: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    personal_style: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    demographic_preferences: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Practice
    session_formats: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    new_clients_capacity: Optional[int] = None
    max_caseload_capacity: Optional[int] = None
    client_intake_speed: Optional[str] = Field(default=None, max_length=50)
    emergency_same_day_capacity: Optional[bool] = None
    preferred_scheduling_density: Optional[str] = Field(default=None, max_length=50)
    weekly_schedule: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    session_durations: Optional[list] = Field(default=None, sa_column=Column(JSON))

    # Insurance
    insurance_panels_accepted: Optional[list] = Field(default=None, sa_column=Column(JSON))
    medicaid_acceptance: Optional[bool] = None
    medicare_acceptance: Optional[bool] = None
    self_pay_accepted: Optional[bool] = None
    sliding_scale: Optional[bool] = None
    employer_eaps: Optional[list] = Field(default=None, sa_column=Column(JSON))

    # Compliance
    hipaa_training_completed: Optional[bool] = None
    ethics_certification: Optional[bool] = None
    signed_baa: Optional[bool] = None
    background_check_consent: Optional[bool] = None
    w9_document_url: Optional[str] = None
    hipaa_document_url: Optional[str] = None
    ethics_document_url: Optional[str] = None
    background_check_document_url: Optional[str] = None

    # Content
    short_bio: Optional[str] = None
    extended_bio: Optional[str] = None
    what_clients_can_expect: Optional[str] = None
    my_approach_to_therapy: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
