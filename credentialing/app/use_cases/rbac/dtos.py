"""
RBAC Use Case DTOs (Data Transfer Objects)
"""

from datetime import datetime
from typing import List, Optional

from ..common import CamelModel


class RoleAssignmentResponse(CamelModel):
    """Response for assign role use case"""

    assignment_id: str
    identity_id: str
    role: str
    expires_at: Optional[datetime] = None
    assigned_by: Optional[str] = None


class MyPermissionsResponse(CamelModel):
    """Response for get my permissions use case"""

    external_subject_id: str
    identity_id: Optional[str] = None
    roles: List[str]
    permissions: List[str]
