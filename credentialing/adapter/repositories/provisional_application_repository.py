from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlmodel import func, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from credentialing.app.repositories.provisional_application_repository import (
    IProvisionalApplicationRepository,
)
from credentialing.domain.base import utcnow
from credentialing.domain.entities import (
    TERMINAL_STATES,
    ProvisionalApplication,
    WorkflowState,
)


class ProvisionalApplicationRepository(IProvisionalApplicationRepository):
    """ProvisionalApplication repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, application_id: UUID) -> Optional[ProvisionalApplication]:
        """Get application by ID, reloading any stale in-session copy"""
        stmt = (
            select(ProvisionalApplication)
            .where(ProvisionalApplication.id == application_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_latest_for_subject(
        self, external_subject_id: str
    ) -> Optional[ProvisionalApplication]:
        """Get the highest submission_number application of a subject"""
        stmt = (
            select(ProvisionalApplication)
            .where(ProvisionalApplication.external_subject_id == external_subject_id)
            .order_by(ProvisionalApplication.submission_number.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def find_open_by_email(
        self, email: str, exclude_subject_id: Optional[str] = None
    ) -> Optional[ProvisionalApplication]:
        """Find a non-rejected application holding this email"""
        return await self._find_open(
            func.lower(ProvisionalApplication.email) == email.lower(),
            exclude_subject_id=exclude_subject_id,
        )

    async def find_open_by_phone(
        self, phone_number: str, exclude_subject_id: Optional[str] = None
    ) -> Optional[ProvisionalApplication]:
        """Find a non-rejected application holding this phone number"""
        return await self._find_open(
            ProvisionalApplication.phone_number == phone_number,
            exclude_subject_id=exclude_subject_id,
        )

    async def find_open_by_license(
        self,
        license_number: str,
        license_state: str,
        exclude_subject_id: Optional[str] = None,
    ) -> Optional[ProvisionalApplication]:
        """Find a non-rejected application holding this license"""
        return await self._find_open(
            ProvisionalApplication.license_number == license_number,
            ProvisionalApplication.license_state == license_state,
            exclude_subject_id=exclude_subject_id,
        )

    async def _find_open(
        self, *criteria, exclude_subject_id: Optional[str] = None
    ) -> Optional[ProvisionalApplication]:
        stmt = select(ProvisionalApplication).where(
            *criteria, ProvisionalApplication.workflow_state != WorkflowState.rejected
        )
        if exclude_subject_id is not None:
            stmt = stmt.where(
                ProvisionalApplication.external_subject_id != exclude_subject_id
            )
        result = await self.session.execute(stmt.limit(1))
        return result.scalars().first()

    async def create(self, application: ProvisionalApplication) -> ProvisionalApplication:
        """Create a new application"""
        self.session.add(application)
        await self.session.flush()
        await self.session.refresh(application)
        return application

    async def update(self, application: ProvisionalApplication) -> ProvisionalApplication:
        """Update existing application"""
        application.updated_at = utcnow()
        self.session.add(application)
        await self.session.flush()
        await self.session.refresh(application)
        return application

    async def claim_transition(
        self,
        application_id: UUID,
        target: WorkflowState,
        allowed_sources: Iterable[WorkflowState],
        values: Optional[Dict[str, Any]] = None,
    ) -> Optional[WorkflowState]:
        """Move an application to target only if it is currently in allowed_sources"""
        sources = list(allowed_sources)
        if not sources:
            return None

        # SET expressions see the pre-update row, so the old state is copied as it was claimed
        stmt = (
            update(ProvisionalApplication)
            .where(
                ProvisionalApplication.id == application_id,
                ProvisionalApplication.workflow_state.in_(sources),
            )
            .values(
                previous_workflow_state=ProvisionalApplication.workflow_state,
                workflow_state=target,
                updated_at=utcnow(),
                **(values or {}),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        if result.rowcount != 1:
            return None

        # The claim holds the row lock until commit, so this read cannot race
        previous_stmt = select(ProvisionalApplication.previous_workflow_state).where(
            ProvisionalApplication.id == application_id
        )
        return (await self.session.execute(previous_stmt)).scalar_one()

    async def list_pending(
        self, state: Optional[WorkflowState] = None, limit: int = 50, offset: int = 0
    ) -> Tuple[List[ProvisionalApplication], int]:
        """List non-terminal applications, oldest first"""
        criteria = [ProvisionalApplication.workflow_state.not_in(list(TERMINAL_STATES))]
        if state is not None:
            criteria.append(ProvisionalApplication.workflow_state == state)

        count_stmt = select(func.count()).select_from(ProvisionalApplication).where(*criteria)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(ProvisionalApplication)
            .where(*criteria)
            .order_by(ProvisionalApplication.created_at.asc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total
