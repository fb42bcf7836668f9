"""
Get Application History Use Case

Chronological workflow log of one application, with cursor pagination.
"""

from typing import Optional
from uuid import UUID

from credentialing.app.services.permission_gate import PermissionGate
from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.context import Principal
from credentialing.libs.result import Error, Result, Return

from .dtos import ApplicationHistoryResponse, HistoryEntry


class GetApplicationHistoryUseCase:
    """
    Use case for reading an application's workflow log.

    Business Rules:
    - Caller needs system.audit
    - Entries ordered oldest first
    - Supports cursor-based pagination
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        principal: Principal,
        application_id: UUID,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Result[ApplicationHistoryResponse]:
        async with self.uow:
            authorized = await PermissionGate(self.uow).authorize(principal, "system.audit")
            if authorized.is_err():
                return authorized

            application = await self.uow.applications.get_by_id(application_id)
            if application is None:
                return Return.err(Error("APPLICATION_NOT_FOUND", "Application not found"))

            entries, next_cursor = await self.uow.workflow_log.get_by_application_paginated(
                application_id, limit=limit, cursor=cursor
            )

            return Return.ok(
                ApplicationHistoryResponse(
                    application_id=str(application_id),
                    entries=[
                        HistoryEntry(
                            id=entry.id,
                            stage=entry.stage,
                            action=entry.action,
                            outcome=entry.outcome.value,
                            actor_type=entry.actor_type.value,
                            actor_id=entry.actor_id,
                            identity_id=str(entry.identity_id) if entry.identity_id else None,
                            details=entry.details or {},
                            error_message=entry.error_message,
                            created_at=entry.created_at,
                        )
                        for entry in entries
                    ],
                    next_cursor=next_cursor,
                )
            )
