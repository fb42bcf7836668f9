from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from credentialing.domain.entities import InviteStatus, Organization, OrganizationInvite


class IOrganizationRepository(ABC):
    """Organization repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, organization_id: UUID) -> Optional[Organization]:
        """Get organization by ID"""
        pass

    @abstractmethod
    async def create(self, organization: Organization) -> Organization:
        """Create a new organization"""
        pass


class IOrganizationInviteRepository(ABC):
    """OrganizationInvite repository interface - application layer"""

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[OrganizationInvite]:
        """Get invite by code"""
        pass

    @abstractmethod
    async def list_invites(
        self,
        organization_id: Optional[UUID] = None,
        status: Optional[InviteStatus] = None,
    ) -> List[OrganizationInvite]:
        """List invites, newest first"""
        pass

    @abstractmethod
    async def create(self, invite: OrganizationInvite) -> OrganizationInvite:
        """Create a new invite"""
        pass

    @abstractmethod
    async def consume_use(self, invite_id: UUID, used_by: UUID, now: datetime) -> bool:
        """
        Atomically consume one use of an invite.

        Increments current_uses only while the invite is active, unexpired
        and below max_uses; flips status to used on the last use.

        Returns:
            True if a use was consumed, False otherwise
        """
        pass
