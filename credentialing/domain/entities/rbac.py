"""
RBAC Entities

Roles, permissions and their assignment to identities.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow


class Role(SQLModel, table=True):
    """Role entity - named bundle of permissions"""

    __tablename__ = "roles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(unique=True, index=True, max_length=50)
    display_name: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None
    priority: int = Field(default=0)
    is_system_role: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class Permission(SQLModel, table=True):
    """Permission entity - "<resource>.<action>" capability"""

    __tablename__ = "permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(unique=True, index=True, max_length=100)
    resource: str = Field(max_length=50)
    action: str = Field(max_length=50)
    description: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class RolePermission(SQLModel, table=True):
    """Link table between roles and permissions"""

    __tablename__ = "role_permissions"

    role_id: UUID = Field(foreign_key="roles.id", primary_key=True)
    permission_id: UUID = Field(foreign_key="permissions.id", primary_key=True)


class RoleAssignment(SQLModel, table=True):
    """
    RoleAssignment entity - grants a role to an identity.

    Business Rules:
    - (identity_id, role_id) is unique
    - An assignment past expires_at grants nothing
    """

    __tablename__ = "role_assignments"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    identity_id: UUID = Field(foreign_key="identities.id", nullable=False, index=True)
    role_id: UUID = Field(foreign_key="roles.id", nullable=False)

    assigned_by: Optional[str] = Field(default=None, max_length=255)
    expires_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_role_assignment_identity_role", "identity_id", "role_id", unique=True),
    )
