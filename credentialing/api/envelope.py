"""
Response envelope shared by every endpoint:

    {"success": bool, "data" | "error": ..., "message": str, "requestId": str}
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ErrorBody(BaseModel):
    """Machine-readable error"""

    code: str
    message: str
    details: Optional[dict] = None


class ApiResponse(BaseModel, Generic[T]):
    """Envelope around every response payload"""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    data: Optional[T] = None
    error: Optional[ErrorBody] = None
    message: Optional[str] = None
    request_id: Optional[str] = Field(default=None, alias="requestId")


def _dump(data: Any) -> Any:
    # Payload models serialize by alias (camelCase)
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, list):
        return [_dump(item) for item in data]
    return data


def success_response(data: Any, message: str, request_id: Optional[str]) -> dict:
    envelope = ApiResponse[Any](
        success=True, data=_dump(data), message=message, request_id=request_id
    ).model_dump(mode="json", by_alias=True)
    envelope.pop("error")
    return envelope


def error_response(
    code: str, message: str, request_id: Optional[str], details: Optional[dict] = None
) -> dict:
    envelope = ApiResponse[Any](
        success=False,
        error=ErrorBody(code=code, message=message, details=details or None),
        message=message,
        request_id=request_id,
    ).model_dump(mode="json", by_alias=True)
    envelope.pop("data")
    return envelope
