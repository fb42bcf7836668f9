from typing import NoReturn

from fastapi import status

from credentialing.libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


# Error code -> HTTP status, grouped by error kind
ERROR_STATUS_CODES = {
    # Validation
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_DOCUMENT_TYPE": status.HTTP_400_BAD_REQUEST,
    "REJECTION_REASON_REQUIRED": status.HTTP_400_BAD_REQUEST,
    "INVALID_TARGET_STAGE": status.HTTP_400_BAD_REQUEST,
    # Authentication
    "AUTHENTICATION_ERROR": status.HTTP_401_UNAUTHORIZED,
    # Authorization
    "PERMISSION_DENIED": status.HTTP_403_FORBIDDEN,
    # Not found
    "APPLICATION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "REGISTRATION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ORGANIZATION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "IDENTITY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ROLE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    # Conflict
    "DUPLICATE_REGISTRATION": status.HTTP_409_CONFLICT,
    "APPLICATION_ALREADY_APPROVED": status.HTTP_409_CONFLICT,
    "APPLICATION_UNDER_REVIEW": status.HTTP_409_CONFLICT,
    "APPLICATION_FINALIZED": status.HTTP_409_CONFLICT,
    "INVALID_TRANSITION": status.HTTP_409_CONFLICT,
    "INVITE_NO_LONGER_VALID": status.HTTP_409_CONFLICT,
    "IDENTITY_CONFLICT": status.HTTP_409_CONFLICT,
}

TRANSIENT_ERROR_CODES = frozenset({"TRANSIENT_STORAGE_ERROR"})


def raise_for_error(error: Error) -> NoReturn:
    """Raise the HTTP exception matching a use case error code"""
    if error.code in ERROR_STATUS_CODES:
        raise ClientError(error, status_code=ERROR_STATUS_CODES[error.code])
    if error.code in TRANSIENT_ERROR_CODES:
        raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    raise ServerError(error)
