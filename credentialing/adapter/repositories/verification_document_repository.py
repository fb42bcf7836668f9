from typing import List
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from credentialing.app.repositories.verification_document_repository import (
    IVerificationDocumentRepository,
)
from credentialing.domain.entities import VerificationDocument


class VerificationDocumentRepository(IVerificationDocumentRepository):
    """VerificationDocument repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, document: VerificationDocument) -> VerificationDocument:
        """Create a new document row"""
        self.session.add(document)
        await self.session.flush()
        await self.session.refresh(document)
        return document

    async def list_by_application(self, application_id: UUID) -> List[VerificationDocument]:
        """Get all documents of an application, oldest first"""
        stmt = (
            select(VerificationDocument)
            .where(VerificationDocument.application_id == application_id)
            .order_by(VerificationDocument.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
