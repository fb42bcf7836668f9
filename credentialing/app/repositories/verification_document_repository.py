from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from credentialing.domain.entities import VerificationDocument


class IVerificationDocumentRepository(ABC):
    """VerificationDocument repository interface - application layer"""

    @abstractmethod
    async def create(self, document: VerificationDocument) -> VerificationDocument:
        """Create a new document row"""
        pass

    @abstractmethod
    async def list_by_application(self, application_id: UUID) -> List[VerificationDocument]:
        """Get all documents of an application, oldest first"""
        pass
