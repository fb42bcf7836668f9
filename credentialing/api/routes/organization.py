from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import EmailStr, Field

from credentialing.api.envelope import success_response
from credentialing.api.error import raise_for_error
from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.app.use_cases.common import CamelModel
from credentialing.app.use_cases.organizations import CreateInviteUseCase, ListInvitesUseCase
from credentialing.depends import (
    get_config,
    get_current_principal,
    get_request_context,
    get_unit_of_work,
)
from credentialing.domain.context import Principal, RequestContext

router = APIRouter(prefix="/verification/organization", tags=["Organization Invites"])


class CreateInviteRequest(CamelModel):
    """
    Create organization invite HTTP request payload

    Without email the invite can be redeemed by anyone holding the code.
    """

    organization_id: UUID
    email: Optional[EmailStr] = None
    max_uses: int = Field(default=1, ge=1)
    expires_at: Optional[datetime] = None
    role: str = Field(default="therapist", min_length=1)


@router.post("/invites", status_code=status.HTTP_201_CREATED)
async def create_invite(
    request: CreateInviteRequest,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
    context: RequestContext = Depends(get_request_context),
):
    """
    Issue an organization invite code.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 401 Unauthorized: AUTHENTICATION_ERROR
        - 403 Forbidden: PERMISSION_DENIED (organizations.update)
        - 404 Not Found: ORGANIZATION_NOT_FOUND, ROLE_NOT_FOUND
    """
    # Execute use case
    use_case = CreateInviteUseCase(uow, config)
    result = await use_case.execute(
        principal,
        request.organization_id,
        email=request.email,
        max_uses=request.max_uses,
        expires_at=request.expires_at,
        role=request.role,
        context=context,
    )

    # Handle errors
    if result.is_err():
        raise_for_error(result.error)

    # Return successful response
    return success_response(result.value, "Invite created", context.request_id)


@router.get("/invites", status_code=status.HTTP_200_OK)
async def list_invites(
    organization_id: Optional[UUID] = Query(default=None, alias="organizationId"),
    invite_status: Optional[str] = Query(default=None, alias="status"),
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    context: RequestContext = Depends(get_request_context),
):
    """
    List organization invites, newest first.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR (unknown status)
        - 401 Unauthorized: AUTHENTICATION_ERROR
        - 403 Forbidden: PERMISSION_DENIED (organizations.read)
    """
    result = await ListInvitesUseCase(uow).execute(principal, organization_id, invite_status)

    if result.is_err():
        raise_for_error(result.error)

    return success_response(result.value, "Invites retrieved", context.request_id)
