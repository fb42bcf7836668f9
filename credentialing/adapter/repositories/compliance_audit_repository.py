from typing import List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from credentialing.app.repositories.compliance_audit_repository import (
    IComplianceAuditRepository,
)
from credentialing.domain.entities import ComplianceAuditEntry


class ComplianceAuditRepository(IComplianceAuditRepository):
    """ComplianceAuditEntry repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: ComplianceAuditEntry) -> ComplianceAuditEntry:
        """Append a compliance audit entry (immutable)"""
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def get_by_resource(
        self, resource_type: str, resource_id: str
    ) -> List[ComplianceAuditEntry]:
        """Get entries of a resource in chronological order"""
        stmt = (
            select(ComplianceAuditEntry)
            .where(
                ComplianceAuditEntry.resource_type == resource_type,
                ComplianceAuditEntry.resource_id == resource_id,
            )
            .order_by(ComplianceAuditEntry.created_at.asc(), ComplianceAuditEntry.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
