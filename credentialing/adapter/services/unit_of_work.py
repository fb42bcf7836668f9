from sqlmodel.ext.asyncio.session import AsyncSession

from credentialing.adapter.repositories.compliance_audit_repository import (
    ComplianceAuditRepository,
)
from credentialing.adapter.repositories.identity_repository import IdentityRepository
from credentialing.adapter.repositories.organization_repository import (
    OrganizationInviteRepository,
    OrganizationRepository,
)
from credentialing.adapter.repositories.professional_profile_repository import (
    ProfessionalProfileRepository,
)
from credentialing.adapter.repositories.provisional_application_repository import (
    ProvisionalApplicationRepository,
)
from credentialing.adapter.repositories.rbac_repository import RbacRepository
from credentialing.adapter.repositories.verification_document_repository import (
    VerificationDocumentRepository,
)
from credentialing.adapter.repositories.verification_record_repository import (
    VerificationRecordRepository,
)
from credentialing.adapter.repositories.workflow_log_repository import WorkflowLogRepository
from credentialing.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.identities = IdentityRepository(self.session)
        self.applications = ProvisionalApplicationRepository(self.session)
        self.profiles = ProfessionalProfileRepository(self.session)
        self.verification_records = VerificationRecordRepository(self.session)
        self.documents = VerificationDocumentRepository(self.session)
        self.organizations = OrganizationRepository(self.session)
        self.invites = OrganizationInviteRepository(self.session)
        self.workflow_log = WorkflowLogRepository(self.session)
        self.compliance_audit = ComplianceAuditRepository(self.session)
        self.rbac = RbacRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
