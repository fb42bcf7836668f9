from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from credentialing.domain.entities import VerificationRecord


class IVerificationRecordRepository(ABC):
    """VerificationRecord repository interface - application layer"""

    @abstractmethod
    async def get_by_identity_id(self, identity_id: UUID) -> Optional[VerificationRecord]:
        """Get verification record of an identity"""
        pass

    @abstractmethod
    async def create(self, record: VerificationRecord) -> VerificationRecord:
        """Create a new verification record"""
        pass

    @abstractmethod
    async def update(self, record: VerificationRecord) -> VerificationRecord:
        """Update existing verification record"""
        pass
