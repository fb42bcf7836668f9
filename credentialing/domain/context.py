"""
Request-scoped value objects passed from the API layer into use cases.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, as asserted by a verified bearer token"""

    subject_id: str
    subject_type: str = "cognito"
    email: Optional[str] = None


@dataclass(frozen=True)
class RequestContext:
    """Origin of the request, recorded on compliance audit entries"""

    request_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


SYSTEM_CONTEXT = RequestContext()
