"""
Organization Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the organization domain.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from ..common import CamelModel


# ============================================================================
# Command DTOs
# ============================================================================


class InviteApplicant(CamelModel):
    """Applicant data needed to activate an account through an invite"""

    external_subject_id: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    profile_image_url: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class RedeemInviteResponse(CamelModel):
    """Response for redeem invite use case"""

    identity_id: str
    organization_id: str
    role: str
    status: str
    email: str


class InviteResponse(CamelModel):
    """Organization invite"""

    id: str
    organization_id: str
    code: str
    email: Optional[str] = None
    role: str
    max_uses: int
    current_uses: int
    status: str
    expires_at: Optional[datetime] = None
    created_by: Optional[str] = None
    created_at: datetime


class InviteListResponse(CamelModel):
    """Response for list invites use case"""

    invites: List[InviteResponse]
