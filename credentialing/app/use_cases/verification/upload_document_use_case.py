"""
Upload Document Use Case

Attaches a supporting document (already stored elsewhere) to an application.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from credentialing.app.services.audit_trail import AuditTrail
from credentialing.app.services.permission_gate import PermissionGate
from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.context import Principal
from credentialing.domain.entities import (
    ActorType,
    DocumentType,
    ProvisionalApplication,
    VerificationDocument,
)
from credentialing.libs.result import Error, Result, Return

from .dtos import DocumentResponse

MANAGE_ALL_PERMISSION = "therapists.manage_all"


def to_document_response(document: VerificationDocument) -> DocumentResponse:
    return DocumentResponse(
        id=str(document.id),
        application_id=str(document.application_id),
        document_type=document.document_type.value,
        file_url=document.file_url,
        file_name=document.file_name,
        file_size=document.file_size,
        mime_type=document.mime_type,
        expiry_date=document.expiry_date,
        status=document.status.value,
        uploaded_by=document.uploaded_by,
        created_at=document.created_at,
    )


async def authorize_document_access(
    gate: PermissionGate, principal: Principal, application: ProvisionalApplication
) -> Result[None]:
    """Applicant of the application, or a holder of therapists.manage_all"""
    if application.external_subject_id == principal.subject_id:
        return Return.ok()
    return await gate.authorize(principal, MANAGE_ALL_PERMISSION)


class UploadDocumentUseCase:
    """
    Use case for uploading a verification document.

    Business Rules:
    - Caller is the applicant or holds therapists.manage_all
    - document_type must be one of DocumentType
    - Terminal applications no longer accept documents
    - The application keeps the latest URL per type; every upload is kept as a row
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        principal: Principal,
        application_id: UUID,
        document_type: str,
        file_url: str,
        file_name: Optional[str] = None,
        file_size: Optional[int] = None,
        mime_type: Optional[str] = None,
        expiry_date: Optional[date] = None,
    ) -> Result[DocumentResponse]:
        try:
            doc_type = DocumentType(document_type)
        except ValueError:
            return Return.err(
                Error(
                    "INVALID_DOCUMENT_TYPE",
                    f"Invalid document type: {document_type}",
                    {"valid_types": [t.value for t in DocumentType]},
                )
            )

        async with self.uow:
            application = await self.uow.applications.get_by_id(application_id)
            if application is None:
                return Return.err(Error("APPLICATION_NOT_FOUND", "Application not found"))

            gate = PermissionGate(self.uow)
            authorized = await authorize_document_access(gate, principal, application)
            if authorized.is_err():
                return authorized

            if application.is_terminal:
                return Return.err(
                    Error(
                        "APPLICATION_FINALIZED",
                        f"Application is already {application.workflow_state.value}",
                    )
                )

            setattr(application, doc_type.application_column, file_url)
            await self.uow.applications.update(application)

            document = await self.uow.documents.create(
                VerificationDocument(
                    application_id=application_id,
                    document_type=doc_type,
                    file_url=file_url,
                    file_name=file_name,
                    file_size=file_size,
                    mime_type=mime_type,
                    expiry_date=expiry_date,
                    uploaded_by=principal.subject_id,
                )
            )

            is_applicant = application.external_subject_id == principal.subject_id
            await AuditTrail(self.uow).record_workflow(
                stage=application.workflow_state.value,
                action="document_uploaded",
                application_id=application_id,
                actor_type=ActorType.applicant if is_applicant else ActorType.admin,
                actor=principal,
                details={"document_id": str(document.id), "document_type": doc_type.value},
            )

            await self.uow.commit()

            return Return.ok(to_document_response(document))
