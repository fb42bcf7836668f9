"""
RBAC Use Cases
"""

from .assign_role_use_case import AssignRoleUseCase
from .dtos import MyPermissionsResponse, RoleAssignmentResponse
from .get_my_permissions_use_case import GetMyPermissionsUseCase

__all__ = [
    "AssignRoleUseCase",
    "GetMyPermissionsUseCase",
    "MyPermissionsResponse",
    "RoleAssignmentResponse",
]
