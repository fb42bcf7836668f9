from typing import Optional
from uuid import UUID

from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from credentialing.app.repositories.identity_repository import IIdentityRepository
from credentialing.domain.entities import Identity


class IdentityRepository(IIdentityRepository):
    """Identity repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, identity_id: UUID) -> Optional[Identity]:
        """Get identity by ID"""
        stmt = select(Identity).where(Identity.id == identity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_subject(
        self, external_subject_id: str, external_subject_type: str
    ) -> Optional[Identity]:
        """Get identity by external identity provider subject"""
        stmt = select(Identity).where(
            Identity.external_subject_id == external_subject_id,
            Identity.external_subject_type == external_subject_type,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[Identity]:
        """Get identity by email (case-insensitive)"""
        stmt = select(Identity).where(func.lower(Identity.email) == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_phone(self, phone_number: str) -> Optional[Identity]:
        """Get identity by phone number"""
        stmt = select(Identity).where(Identity.phone_number == phone_number).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create(self, identity: Identity) -> Identity:
        """Create a new identity"""
        self.session.add(identity)
        await self.session.flush()
        await self.session.refresh(identity)
        return identity

    async def update(self, identity: Identity) -> Identity:
        """Update existing identity"""
        self.session.add(identity)
        await self.session.flush()
        await self.session.refresh(identity)
        return identity
