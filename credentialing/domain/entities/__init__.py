"""
Credentialing Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    REVIEW_PIPELINE,
    TERMINAL_STATES,
    ActorType,
    BackgroundCheckStatus,
    ComplianceLevel,
    DocumentStatus,
    DocumentType,
    IdentityStatus,
    InviteStatus,
    OrganizationStatus,
    WorkflowOutcome,
    WorkflowState,
)

# Export all entities
from .organization import Organization, OrganizationInvite
from .identity import Identity
from .provisional_application import ProvisionalApplication
from .professional_profile import ProfessionalProfile
from .verification_record import VerificationRecord
from .verification_document import VerificationDocument
from .workflow_log import WorkflowLogEntry
from .compliance_audit import ComplianceAuditEntry
from .rbac import Permission, Role, RoleAssignment, RolePermission

__all__ = [
    # Enums
    "REVIEW_PIPELINE",
    "TERMINAL_STATES",
    "ActorType",
    "BackgroundCheckStatus",
    "ComplianceLevel",
    "DocumentStatus",
    "DocumentType",
    "IdentityStatus",
    "InviteStatus",
    "OrganizationStatus",
    "WorkflowOutcome",
    "WorkflowState",
    # Entities
    "Organization",
    "OrganizationInvite",
    "Identity",
    "ProvisionalApplication",
    "ProfessionalProfile",
    "VerificationRecord",
    "VerificationDocument",
    "WorkflowLogEntry",
    "ComplianceAuditEntry",
    "Permission",
    "Role",
    "RoleAssignment",
    "RolePermission",
]
