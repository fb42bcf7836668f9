from typing import Optional
from uuid import uuid4

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from credentialing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from credentialing.api.error import ClientError
from credentialing.api.utils.jwt import verify_jwt
from credentialing.domain.context import Principal, RequestContext
from credentialing.libs.result import Error

security = HTTPBearer(auto_error=False)


def get_config(request: Request):
    return request.app.state.config


async def get_unit_of_work(request: Request):
    async with request.app.state.session_factory() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_request_context(request: Request) -> RequestContext:
    request_id = getattr(request.state, "request_id", None) or request.headers.get(
        "X-Request-ID", str(uuid4())
    )
    return RequestContext(
        request_id=request_id,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    config=Depends(get_config),
) -> Principal:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Principal built from the sub and email claims

    Raises:
        ClientError: 401 if token is missing, invalid or expired
    """
    if credentials is None:
        raise ClientError(
            Error("AUTHENTICATION_ERROR", "Missing bearer token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    payload = verify_jwt(credentials.credentials, config)
    if payload is None:
        raise ClientError(
            Error("AUTHENTICATION_ERROR", "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return Principal(
        subject_id=payload["sub"],
        subject_type=config.EXTERNAL_SUBJECT_TYPE,
        email=payload.get("email"),
    )
