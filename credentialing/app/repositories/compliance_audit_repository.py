from abc import ABC, abstractmethod
from typing import List

from credentialing.domain.entities import ComplianceAuditEntry


class IComplianceAuditRepository(ABC):
    """ComplianceAuditEntry repository interface - application layer"""

    @abstractmethod
    async def create(self, entry: ComplianceAuditEntry) -> ComplianceAuditEntry:
        """Append a compliance audit entry (immutable)"""
        pass

    @abstractmethod
    async def get_by_resource(
        self, resource_type: str, resource_id: str
    ) -> List[ComplianceAuditEntry]:
        """Get entries of a resource in chronological order"""
        pass
