from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from uuid import UUID

from credentialing.domain.entities import WorkflowLogEntry


class IWorkflowLogRepository(ABC):
    """WorkflowLogEntry repository interface - application layer"""

    @abstractmethod
    async def create(self, entry: WorkflowLogEntry) -> WorkflowLogEntry:
        """Append a workflow log entry (immutable)"""
        pass

    @abstractmethod
    async def get_by_application_paginated(
        self, application_id: UUID, limit: int = 50, cursor: Optional[str] = None
    ) -> Tuple[List[WorkflowLogEntry], Optional[str]]:
        """
        Get workflow log entries of an application with cursor-based pagination.

        Returns:
            Tuple of (entries list, next_cursor)
            - entries: ordered by (created_at, id) ASC
            - next_cursor: Cursor for next page, None if no more entries
        """
        pass
