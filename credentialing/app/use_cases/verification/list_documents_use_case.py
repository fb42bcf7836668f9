"""
List Documents Use Case
"""

from typing import List
from uuid import UUID

from credentialing.app.services.permission_gate import PermissionGate
from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.context import Principal
from credentialing.libs.result import Error, Result, Return

from .dtos import DocumentResponse
from .upload_document_use_case import authorize_document_access, to_document_response


class ListDocumentsUseCase:
    """
    Use case for listing an application's documents, oldest first.

    Business Rules:
    - Same access rule as upload: applicant or therapists.manage_all
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, principal: Principal, application_id: UUID
    ) -> Result[List[DocumentResponse]]:
        async with self.uow:
            application = await self.uow.applications.get_by_id(application_id)
            if application is None:
                return Return.err(Error("APPLICATION_NOT_FOUND", "Application not found"))

            authorized = await authorize_document_access(
                PermissionGate(self.uow), principal, application
            )
            if authorized.is_err():
                return authorized

            documents = await self.uow.documents.list_by_application(application_id)
            return Return.ok([to_document_response(document) for document in documents])
