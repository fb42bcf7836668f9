from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from credentialing.app.repositories.professional_profile_repository import (
    IProfessionalProfileRepository,
)
from credentialing.domain.base import utcnow
from credentialing.domain.entities import ProfessionalProfile


class ProfessionalProfileRepository(IProfessionalProfileRepository):
    """ProfessionalProfile repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_identity_id(self, identity_id: UUID) -> Optional[ProfessionalProfile]:
        """Get profile of an identity"""
        stmt = select(ProfessionalProfile).where(ProfessionalProfile.identity_id == identity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, profile: ProfessionalProfile) -> ProfessionalProfile:
        """Create a new profile"""
        self.session.add(profile)
        await self.session.flush()
        await self.session.refresh(profile)
        return profile

    async def update(self, profile: ProfessionalProfile) -> ProfessionalProfile:
        """Update existing profile"""
        profile.updated_at = utcnow()
        self.session.add(profile)
        await self.session.flush()
        await self.session.refresh(profile)
        return profile
