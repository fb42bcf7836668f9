from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from credentialing.domain.entities import ProfessionalProfile


class IProfessionalProfileRepository(ABC):
    """ProfessionalProfile repository interface - application layer"""

    @abstractmethod
    async def get_by_identity_id(self, identity_id: UUID) -> Optional[ProfessionalProfile]:
        """Get profile of an identity"""
        pass

    @abstractmethod
    async def create(self, profile: ProfessionalProfile) -> ProfessionalProfile:
        """Create a new profile"""
        pass

    @abstractmethod
    async def update(self, profile: ProfessionalProfile) -> ProfessionalProfile:
        """Update existing profile"""
        pass
