from datetime import date, datetime
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.exceptions import RequestValidationError
from pydantic import EmailStr, Field, ValidationError

from credentialing.api.envelope import success_response
from credentialing.api.error import raise_for_error
from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.app.use_cases.common import CamelModel
from credentialing.app.use_cases.rbac import AssignRoleUseCase, GetMyPermissionsUseCase
from credentialing.app.use_cases.verification import (
    CheckDuplicateUseCase,
    GetApplicationHistoryUseCase,
    GetRegistrationStatusUseCase,
    ListDocumentsUseCase,
    ListPendingApplicationsUseCase,
    RegisterApplicationUseCase,
    TransitionApplicationUseCase,
    UploadDocumentUseCase,
    parse_registration,
)
from credentialing.depends import (
    get_config,
    get_current_principal,
    get_request_context,
    get_unit_of_work,
)
from credentialing.domain.context import Principal, RequestContext
from credentialing.libs.result import Error

router = APIRouter(prefix="/verification", tags=["Verification"])


class CheckDuplicateRequest(CamelModel):
    """POST /verification/check-duplicate payload"""

    email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(default=None, max_length=20)


class RejectRequest(CamelModel):
    """POST /verification/{id}/reject payload"""

    reason: Optional[str] = Field(default=None, max_length=2000)


class AdvanceRequest(CamelModel):
    """POST /verification/{id}/advance payload"""

    target_stage: str = Field(..., description="documents_review or final_review")


class UploadDocumentRequest(CamelModel):
    """POST /verification/{id}/documents payload"""

    document_type: str
    file_url: str = Field(..., min_length=1)
    file_name: Optional[str] = None
    file_size: Optional[int] = Field(default=None, ge=0)
    mime_type: Optional[str] = None
    expiry_date: Optional[date] = None


class AssignRoleRequest(CamelModel):
    """POST /verification/rbac/assignments payload"""

    identity_id: UUID
    role: str = Field(..., min_length=1)
    expires_at: Optional[datetime] = None


# ============================================================================
# Public intake
# ============================================================================


@router.post("/check-duplicate", status_code=status.HTTP_200_OK)
async def check_duplicate(
    request: CheckDuplicateRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    context: RequestContext = Depends(get_request_context),
):
    """
    Check whether an email or phone number is already taken.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR (neither email nor phone given)
    """
    # Execute use case
    use_case = CheckDuplicateUseCase(uow)
    result = await use_case.execute(request.email, request.phone_number)

    # Handle errors
    if result.is_err():
        raise_for_error(result.error)

    # Return successful response
    return success_response(result.value, result.value.message, context.request_id)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: Dict[str, Any] = Body(...),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    context: RequestContext = Depends(get_request_context),
):
    """
    Submit a professional registration, or activate through an org invite code.

    The payload is validated as a full application, or as identity data only
    when it carries an orgInviteCode.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 409 Conflict: DUPLICATE_REGISTRATION, APPLICATION_ALREADY_APPROVED,
                        APPLICATION_UNDER_REVIEW, INVITE_NO_LONGER_VALID,
                        IDENTITY_CONFLICT
        - 503 Service Unavailable: TRANSIENT_STORAGE_ERROR
    """
    try:
        command = parse_registration(payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False), body=payload)

    # Execute use case
    use_case = RegisterApplicationUseCase(uow, config)
    result = await use_case.execute(command, context)

    # Handle errors
    if result.is_err():
        raise_for_error(result.error)

    # Return successful response
    return success_response(result.value, result.value.message, context.request_id)


@router.get("/status/{external_subject_id}", status_code=status.HTTP_200_OK)
async def get_registration_status(
    external_subject_id: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    context: RequestContext = Depends(get_request_context),
):
    """
    Registration status of an external subject.

    Raises:
        - 404 Not Found: REGISTRATION_NOT_FOUND
    """
    # Execute use case
    use_case = GetRegistrationStatusUseCase(uow, config)
    result = await use_case.execute(external_subject_id)

    # Handle errors
    if result.is_err():
        raise_for_error(result.error)

    # Return successful response
    return success_response(result.value, result.value.message, context.request_id)


# ============================================================================
# Authenticated caller
# ============================================================================


@router.get("/me/permissions", status_code=status.HTTP_200_OK)
async def get_my_permissions(
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    context: RequestContext = Depends(get_request_context),
):
    """
    Effective roles and permissions of the caller.

    Raises:
        - 401 Unauthorized: AUTHENTICATION_ERROR
    """
    result = await GetMyPermissionsUseCase(uow).execute(principal)

    if result.is_err():
        raise_for_error(result.error)

    return success_response(result.value, "Permissions retrieved", context.request_id)


@router.post("/{application_id}/documents", status_code=status.HTTP_201_CREATED)
async def upload_document(
    application_id: UUID,
    request: UploadDocumentRequest,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    context: RequestContext = Depends(get_request_context),
):
    """
    Attach a verification document to an application.

    Raises:
        - 400 Bad Request: INVALID_DOCUMENT_TYPE
        - 401 Unauthorized: AUTHENTICATION_ERROR
        - 403 Forbidden: PERMISSION_DENIED (not the applicant, no therapists.manage_all)
        - 404 Not Found: APPLICATION_NOT_FOUND
        - 409 Conflict: APPLICATION_FINALIZED
    """
    # Execute use case
    use_case = UploadDocumentUseCase(uow)
    result = await use_case.execute(
        principal,
        application_id,
        request.document_type,
        request.file_url,
        file_name=request.file_name,
        file_size=request.file_size,
        mime_type=request.mime_type,
        expiry_date=request.expiry_date,
    )

    # Handle errors
    if result.is_err():
        raise_for_error(result.error)

    # Return successful response
    return success_response(result.value, "Document uploaded", context.request_id)


@router.get("/{application_id}/documents", status_code=status.HTTP_200_OK)
async def list_documents(
    application_id: UUID,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    context: RequestContext = Depends(get_request_context),
):
    """
    Documents attached to an application, oldest first.

    Raises:
        - 401 Unauthorized: AUTHENTICATION_ERROR
        - 403 Forbidden: PERMISSION_DENIED
        - 404 Not Found: APPLICATION_NOT_FOUND
    """
    result = await ListDocumentsUseCase(uow).execute(principal, application_id)

    if result.is_err():
        raise_for_error(result.error)

    return success_response(result.value, "Documents retrieved", context.request_id)


# ============================================================================
# Admin review pipeline
# ============================================================================


@router.get("/pending", status_code=status.HTTP_200_OK)
async def list_pending(
    stage: Optional[str] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    context: RequestContext = Depends(get_request_context),
):
    """
    Review queue: applications not yet approved or rejected.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR (unknown or terminal stage)
        - 401 Unauthorized: AUTHENTICATION_ERROR
        - 403 Forbidden: PERMISSION_DENIED (therapists.read)
    """
    result = await ListPendingApplicationsUseCase(uow).execute(principal, stage, limit, offset)

    if result.is_err():
        raise_for_error(result.error)

    return success_response(result.value, "Pending applications retrieved", context.request_id)


async def _transition(
    application_id: UUID,
    target: str,
    principal: Principal,
    uow: UnitOfWork,
    config,
    context: RequestContext,
    reason: Optional[str] = None,
):
    # Execute use case
    use_case = TransitionApplicationUseCase(uow, config)
    result = await use_case.execute(application_id, target, principal, reason, context)

    # Handle errors
    if result.is_err():
        raise_for_error(result.error)

    # Return successful response
    return success_response(result.value, result.value.message, context.request_id)


@router.post("/{application_id}/approve", status_code=status.HTTP_200_OK)
async def approve_application(
    application_id: UUID,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    context: RequestContext = Depends(get_request_context),
):
    """
    Approve an application and activate the professional's account.

    Repeating the call on an approved application succeeds with alreadyApplied.

    Raises:
        - 401 Unauthorized: AUTHENTICATION_ERROR
        - 403 Forbidden: PERMISSION_DENIED (therapists.approve)
        - 404 Not Found: APPLICATION_NOT_FOUND
        - 409 Conflict: APPLICATION_FINALIZED, INVALID_TRANSITION, IDENTITY_CONFLICT
        - 503 Service Unavailable: TRANSIENT_STORAGE_ERROR
    """
    return await _transition(application_id, "approved", principal, uow, config, context)


@router.post("/{application_id}/reject", status_code=status.HTTP_200_OK)
async def reject_application(
    application_id: UUID,
    request: RejectRequest,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    context: RequestContext = Depends(get_request_context),
):
    """
    Reject an application with a reason.

    Raises:
        - 400 Bad Request: REJECTION_REASON_REQUIRED
        - 401 Unauthorized: AUTHENTICATION_ERROR
        - 403 Forbidden: PERMISSION_DENIED (therapists.approve)
        - 404 Not Found: APPLICATION_NOT_FOUND
        - 409 Conflict: APPLICATION_FINALIZED
    """
    return await _transition(
        application_id, "rejected", principal, uow, config, context, reason=request.reason
    )


@router.post("/{application_id}/background-check", status_code=status.HTTP_200_OK)
async def initiate_background_check(
    application_id: UUID,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    context: RequestContext = Depends(get_request_context),
):
    """
    Move an application into the background check stage.

    Raises:
        - 401 Unauthorized: AUTHENTICATION_ERROR
        - 403 Forbidden: PERMISSION_DENIED (therapists.update)
        - 404 Not Found: APPLICATION_NOT_FOUND
        - 409 Conflict: APPLICATION_FINALIZED, INVALID_TRANSITION
    """
    return await _transition(application_id, "background_check", principal, uow, config, context)


@router.post("/{application_id}/advance", status_code=status.HTTP_200_OK)
async def advance_application(
    application_id: UUID,
    request: AdvanceRequest,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    context: RequestContext = Depends(get_request_context),
):
    """
    Move an application to documents_review or final_review.

    Raises:
        - 400 Bad Request: INVALID_TARGET_STAGE
        - 401 Unauthorized: AUTHENTICATION_ERROR
        - 403 Forbidden: PERMISSION_DENIED (therapists.update)
        - 404 Not Found: APPLICATION_NOT_FOUND
        - 409 Conflict: APPLICATION_FINALIZED, INVALID_TRANSITION
    """
    if request.target_stage not in ("documents_review", "final_review"):
        raise_for_error(
            Error("INVALID_TARGET_STAGE", f"Cannot advance to {request.target_stage}")
        )
    return await _transition(
        application_id, request.target_stage, principal, uow, config, context
    )


@router.get("/{application_id}/history", status_code=status.HTTP_200_OK)
async def get_application_history(
    application_id: UUID,
    limit: int = Query(default=50, ge=1, le=200),
    cursor: Optional[str] = Query(default=None),
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    context: RequestContext = Depends(get_request_context),
):
    """
    Workflow log of an application, oldest first, cursor paginated.

    Raises:
        - 401 Unauthorized: AUTHENTICATION_ERROR
        - 403 Forbidden: PERMISSION_DENIED (system.audit)
        - 404 Not Found: APPLICATION_NOT_FOUND
    """
    result = await GetApplicationHistoryUseCase(uow).execute(
        principal, application_id, limit, cursor
    )

    if result.is_err():
        raise_for_error(result.error)

    return success_response(result.value, "History retrieved", context.request_id)


@router.post("/rbac/assignments", status_code=status.HTTP_201_CREATED)
async def assign_role(
    request: AssignRoleRequest,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    context: RequestContext = Depends(get_request_context),
):
    """
    Assign a role to an identity.

    Raises:
        - 401 Unauthorized: AUTHENTICATION_ERROR
        - 403 Forbidden: PERMISSION_DENIED (users.manage_roles)
        - 404 Not Found: IDENTITY_NOT_FOUND, ROLE_NOT_FOUND
    """
    result = await AssignRoleUseCase(uow).execute(
        principal, request.identity_id, request.role, request.expires_at, context
    )

    if result.is_err():
        raise_for_error(result.error)

    return success_response(result.value, "Role assigned", context.request_id)
