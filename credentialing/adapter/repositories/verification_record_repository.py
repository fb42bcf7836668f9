from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from credentialing.app.repositories.verification_record_repository import (
    IVerificationRecordRepository,
)
from credentialing.domain.base import utcnow
from credentialing.domain.entities import VerificationRecord


class VerificationRecordRepository(IVerificationRecordRepository):
    """VerificationRecord repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_identity_id(self, identity_id: UUID) -> Optional[VerificationRecord]:
        """Get verification record of an identity"""
        stmt = select(VerificationRecord).where(VerificationRecord.identity_id == identity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, record: VerificationRecord) -> VerificationRecord:
        """Create a new verification record"""
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def update(self, record: VerificationRecord) -> VerificationRecord:
        """Update existing verification record"""
        record.updated_at = utcnow()
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record
