"""
Verification Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class IdentityStatus(str, Enum):
    """Production account status"""

    pending_verification = "pending_verification"
    active = "active"
    suspended = "suspended"
    deleted = "deleted"


class WorkflowState(str, Enum):
    """
    Single source of truth for an application's position in review.

    The legacy registration label is derived from it (see registration_label).
    """

    registration_submitted = "registration_submitted"
    documents_review = "documents_review"
    background_check = "background_check"
    final_review = "final_review"
    approved = "approved"
    rejected = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES

    @property
    def registration_label(self) -> str:
        if self is WorkflowState.registration_submitted:
            return "pending_review"
        return self.value


TERMINAL_STATES = frozenset({WorkflowState.approved, WorkflowState.rejected})

# Forward order of the review pipeline; terminal states sit outside it
REVIEW_PIPELINE = (
    WorkflowState.registration_submitted,
    WorkflowState.documents_review,
    WorkflowState.background_check,
    WorkflowState.final_review,
)


class BackgroundCheckStatus(str, Enum):
    """Background check slot; the vendor callback fills in the outcome"""

    not_started = "not_started"
    pending = "pending"
    completed = "completed"
    failed = "failed"


class InviteStatus(str, Enum):
    """Organization invite status"""

    active = "active"
    used = "used"
    expired = "expired"
    disabled = "disabled"


class OrganizationStatus(str, Enum):
    """Organization status"""

    active = "active"
    inactive = "inactive"


class ActorType(str, Enum):
    """Who performed a workflow action"""

    system = "system"
    admin = "admin"
    applicant = "applicant"


class WorkflowOutcome(str, Enum):
    """Outcome recorded on a workflow log entry"""

    success = "success"
    failed = "failed"
    pending = "pending"


class ComplianceLevel(str, Enum):
    """Sensitivity of a compliance audit entry"""

    standard = "standard"
    pii = "pii"
    critical = "critical"


class DocumentType(str, Enum):
    """Uploadable verification documents"""

    license_document = "license_document"
    degree_certificate = "degree_certificate"
    malpractice_insurance = "malpractice_insurance"
    photo_id = "photo_id"
    headshot = "headshot"
    w9_document = "w9_document"
    hipaa_document = "hipaa_document"
    ethics_document = "ethics_document"
    background_check_document = "background_check_document"

    @property
    def application_column(self) -> str:
        """Column on ProvisionalApplication that holds the latest URL"""
        if self is DocumentType.malpractice_insurance:
            return "malpractice_document_url"
        return f"{self.value}_url"


class DocumentStatus(str, Enum):
    """Review status of an uploaded document"""

    pending = "pending"
    approved = "approved"
    rejected = "rejected"
