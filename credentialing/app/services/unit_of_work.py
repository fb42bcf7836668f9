from abc import ABC, abstractmethod

from credentialing.app.repositories.compliance_audit_repository import IComplianceAuditRepository
from credentialing.app.repositories.identity_repository import IIdentityRepository
from credentialing.app.repositories.organization_repository import (
    IOrganizationInviteRepository,
    IOrganizationRepository,
)
from credentialing.app.repositories.professional_profile_repository import (
    IProfessionalProfileRepository,
)
from credentialing.app.repositories.provisional_application_repository import (
    IProvisionalApplicationRepository,
)
from credentialing.app.repositories.rbac_repository import IRbacRepository
from credentialing.app.repositories.verification_document_repository import (
    IVerificationDocumentRepository,
)
from credentialing.app.repositories.verification_record_repository import (
    IVerificationRecordRepository,
)
from credentialing.app.repositories.workflow_log_repository import IWorkflowLogRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    identities: IIdentityRepository
    applications: IProvisionalApplicationRepository
    profiles: IProfessionalProfileRepository
    verification_records: IVerificationRecordRepository
    documents: IVerificationDocumentRepository
    organizations: IOrganizationRepository
    invites: IOrganizationInviteRepository
    workflow_log: IWorkflowLogRepository
    compliance_audit: IComplianceAuditRepository
    rbac: IRbacRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
