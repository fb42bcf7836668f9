import base64
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlmodel import and_, or_, select
from sqlmodel.ext.asyncio.session import AsyncSession

from credentialing.app.repositories.workflow_log_repository import IWorkflowLogRepository
from credentialing.domain.entities import WorkflowLogEntry


class WorkflowLogRepository(IWorkflowLogRepository):
    """WorkflowLogEntry repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: WorkflowLogEntry) -> WorkflowLogEntry:
        """Append a workflow log entry (immutable)"""
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def get_by_application_paginated(
        self, application_id: UUID, limit: int = 50, cursor: Optional[str] = None
    ) -> Tuple[List[WorkflowLogEntry], Optional[str]]:
        """
        Get workflow log entries of an application with cursor-based pagination.

        Cursor format: base64-encoded "<ISO created_at>|<id>" of the last entry
        """
        # Build query
        stmt = select(WorkflowLogEntry).where(WorkflowLogEntry.application_id == application_id)

        # Apply cursor if provided
        if cursor:
            try:
                cursor_str = base64.b64decode(cursor).decode("utf-8")
                timestamp_str, id_str = cursor_str.rsplit("|", 1)
                cursor_timestamp = datetime.fromisoformat(timestamp_str)
                cursor_id = int(id_str)
                stmt = stmt.where(
                    or_(
                        WorkflowLogEntry.created_at > cursor_timestamp,
                        and_(
                            WorkflowLogEntry.created_at == cursor_timestamp,
                            WorkflowLogEntry.id > cursor_id,
                        ),
                    )
                )
            except (ValueError, TypeError):
                # Invalid cursor, ignore and return from beginning
                pass

        # Oldest first; id breaks ties between equal timestamps
        stmt = stmt.order_by(
            WorkflowLogEntry.created_at.asc(), WorkflowLogEntry.id.asc()
        ).limit(limit + 1)

        result = await self.session.execute(stmt)
        entries = list(result.scalars().all())

        has_more = len(entries) > limit
        if has_more:
            entries = entries[:limit]

        next_cursor = None
        if has_more and entries:
            last_entry = entries[-1]
            cursor_str = f"{last_entry.created_at.isoformat()}|{last_entry.id}"
            next_cursor = base64.b64encode(cursor_str.encode("utf-8")).decode("utf-8")

        return entries, next_cursor
