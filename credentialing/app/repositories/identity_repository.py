from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from credentialing.domain.entities import Identity


class IIdentityRepository(ABC):
    """Identity repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, identity_id: UUID) -> Optional[Identity]:
        """Get identity by ID"""
        pass

    @abstractmethod
    async def get_by_subject(
        self, external_subject_id: str, external_subject_type: str
    ) -> Optional[Identity]:
        """Get identity by external identity provider subject"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Identity]:
        """Get identity by email (case-insensitive)"""
        pass

    @abstractmethod
    async def get_by_phone(self, phone_number: str) -> Optional[Identity]:
        """Get identity by phone number"""
        pass

    @abstractmethod
    async def create(self, identity: Identity) -> Identity:
        """Create a new identity"""
        pass

    @abstractmethod
    async def update(self, identity: Identity) -> Identity:
        """Update existing identity"""
        pass
