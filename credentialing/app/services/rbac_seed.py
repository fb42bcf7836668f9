"""
RBAC Catalog Seeding

Default roles, permissions and role->permission mapping. Idempotent:
existing rows are left alone and only missing ones are inserted.
"""

import logging
from typing import Dict

from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.entities import Permission, Role

logger = logging.getLogger(__name__)

# name -> (display name, description, system role)
ROLES = {
    "super_admin": ("Super Administrator", "Full system access with all permissions", True),
    "admin": ("Administrator", "Administrative access to manage users and settings", True),
    "therapist": ("Therapist", "Licensed therapist providing mental health services", True),
    "client": ("Client", "Client receiving mental health services", True),
    "clinical_supervisor": (
        "Clinical Supervisor",
        "Supervises therapists and reviews clinical work",
        True,
    ),
    "billing_admin": ("Billing Administrator", "Manages billing, payments, and insurance", False),
    "support_staff": ("Support Staff", "Customer support and administrative assistance", False),
}

PERMISSIONS = {
    "clients.read": "View client information",
    "clients.create": "Create new clients",
    "clients.update": "Update client information",
    "clients.delete": "Delete clients",
    "clients.assign": "Assign clients to therapists",
    "appointments.read": "View appointments",
    "appointments.create": "Create appointments",
    "appointments.update": "Update appointments",
    "appointments.delete": "Cancel appointments",
    "appointments.manage_all": "Manage all appointments in system",
    "notes.read": "View clinical notes",
    "notes.create": "Create clinical notes",
    "notes.update": "Update clinical notes",
    "notes.delete": "Delete clinical notes",
    "notes.review": "Review and approve clinical notes",
    "users.read": "View user information",
    "users.create": "Create new users",
    "users.update": "Update user information",
    "users.delete": "Delete users",
    "users.manage_roles": "Assign and revoke user roles",
    "therapists.read": "View therapist information",
    "therapists.update": "Update therapist profiles",
    "therapists.approve": "Approve therapist applications",
    "therapists.manage_all": "Full therapist management",
    "billing.read": "View billing information",
    "billing.create": "Create invoices and charges",
    "billing.update": "Update billing information",
    "billing.process": "Process payments",
    "organizations.read": "View organization information",
    "organizations.create": "Create organizations",
    "organizations.update": "Update organization information",
    "organizations.delete": "Delete organizations",
    "system.settings": "Manage system settings",
    "system.audit": "View audit logs",
    "system.reports": "Generate system reports",
}


def role_permission_map() -> Dict[str, frozenset]:
    all_permissions = frozenset(PERMISSIONS)
    return {
        "super_admin": all_permissions,
        "admin": all_permissions - {"system.settings", "users.delete"},
        "therapist": frozenset(
            {
                "clients.read",
                "clients.update",
                "appointments.read",
                "appointments.create",
                "appointments.update",
                "appointments.delete",
                "notes.read",
                "notes.create",
                "notes.update",
            }
        ),
        "client": frozenset({"appointments.read", "appointments.create"}),
        "clinical_supervisor": frozenset(
            {
                "clients.read",
                "appointments.read",
                "appointments.manage_all",
                "notes.read",
                "notes.review",
                "therapists.read",
            }
        ),
        "billing_admin": frozenset(p for p in all_permissions if p.startswith("billing.")),
        "support_staff": frozenset(
            {"clients.read", "appointments.read", "therapists.read", "users.read"}
        ),
    }


async def seed_rbac(uow: UnitOfWork) -> Dict[str, int]:
    """
    Insert any missing roles, permissions and role->permission links.

    Returns:
        Counts of rows created per table
    """
    created = {"roles": 0, "permissions": 0, "role_permissions": 0}

    async with uow:
        roles = {}
        for name, (display_name, description, is_system_role) in ROLES.items():
            role = await uow.rbac.get_role_by_name(name)
            if role is None:
                role = await uow.rbac.create_role(
                    Role(
                        name=name,
                        display_name=display_name,
                        description=description,
                        is_system_role=is_system_role,
                    )
                )
                created["roles"] += 1
            roles[name] = role

        permissions = {}
        for name, description in PERMISSIONS.items():
            permission = await uow.rbac.get_permission_by_name(name)
            if permission is None:
                resource, action = name.split(".", 1)
                permission = await uow.rbac.create_permission(
                    Permission(name=name, resource=resource, action=action, description=description)
                )
                created["permissions"] += 1
            permissions[name] = permission

        for role_name, permission_names in role_permission_map().items():
            for permission_name in sorted(permission_names):
                if await uow.rbac.grant_permission(
                    roles[role_name].id, permissions[permission_name].id
                ):
                    created["role_permissions"] += 1

        await uow.commit()

    logger.info(f"RBAC catalog seeded: {created}")
    return created
