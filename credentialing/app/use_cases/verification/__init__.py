"""
Verification Use Cases

Intake, review pipeline, documents and history.
"""

from .check_duplicate_use_case import CheckDuplicateUseCase
from .dtos import (
    ApplicationHistoryResponse,
    ApplicationPayload,
    DocumentResponse,
    DuplicateCheckResponse,
    InviteRegistrationCommand,
    PendingApplicationsResponse,
    RegisterApplicationCommand,
    RegistrationResponse,
    RegistrationStatusResponse,
    TransitionResponse,
    parse_registration,
)
from .get_application_history_use_case import GetApplicationHistoryUseCase
from .get_registration_status_use_case import GetRegistrationStatusUseCase
from .list_documents_use_case import ListDocumentsUseCase
from .list_pending_use_case import ListPendingApplicationsUseCase
from .register_application_use_case import RegisterApplicationUseCase
from .transition_application_use_case import TransitionApplicationUseCase
from .upload_document_use_case import UploadDocumentUseCase

__all__ = [
    "CheckDuplicateUseCase",
    "RegisterApplicationUseCase",
    "GetRegistrationStatusUseCase",
    "TransitionApplicationUseCase",
    "ListPendingApplicationsUseCase",
    "GetApplicationHistoryUseCase",
    "UploadDocumentUseCase",
    "ListDocumentsUseCase",
    "ApplicationHistoryResponse",
    "ApplicationPayload",
    "DocumentResponse",
    "DuplicateCheckResponse",
    "InviteRegistrationCommand",
    "PendingApplicationsResponse",
    "RegisterApplicationCommand",
    "RegistrationResponse",
    "RegistrationStatusResponse",
    "TransitionResponse",
    "parse_registration",
]
