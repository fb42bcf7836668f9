from unittest.mock import AsyncMock, MagicMock

import pytest

from config import ApplicationConfig
from credentialing.domain.context import Principal
from credentialing.domain.entities import Identity, IdentityStatus


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with every repository as an AsyncMock"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.identities = AsyncMock()
    uow.applications = AsyncMock()
    uow.profiles = AsyncMock()
    uow.verification_records = AsyncMock()
    uow.documents = AsyncMock()
    uow.organizations = AsyncMock()
    uow.invites = AsyncMock()
    uow.workflow_log = AsyncMock()
    uow.compliance_audit = AsyncMock()
    uow.rbac = AsyncMock()

    # Nothing exists unless a test says so
    uow.identities.get_by_subject.return_value = None
    uow.identities.get_by_email.return_value = None
    uow.identities.get_by_phone.return_value = None
    uow.applications.get_latest_for_subject.return_value = None
    uow.applications.find_open_by_email.return_value = None
    uow.applications.find_open_by_phone.return_value = None
    uow.applications.find_open_by_license.return_value = None
    uow.applications.claim_transition.return_value = None
    uow.rbac.get_permission_names.return_value = set()
    uow.rbac.get_assignment.return_value = None

    # Writes echo back the entity they were given
    for repo in (
        uow.identities,
        uow.applications,
        uow.profiles,
        uow.verification_records,
        uow.documents,
        uow.invites,
        uow.workflow_log,
        uow.compliance_audit,
    ):
        repo.create.side_effect = lambda entity: entity
    uow.identities.update.side_effect = lambda entity: entity
    uow.applications.update.side_effect = lambda entity: entity
    uow.rbac.save_assignment.side_effect = lambda entity: entity

    return uow


@pytest.fixture
def config():
    return ApplicationConfig


@pytest.fixture
def admin():
    return Principal(subject_id="admin-sub", subject_type="cognito", email="admin@example.com")


@pytest.fixture
def grant(mock_uow, admin):
    """Give the admin principal an active identity holding the named permissions"""

    def _grant(*permissions):
        mock_uow.identities.get_by_subject.return_value = Identity(
            external_subject_id=admin.subject_id,
            email=admin.email,
            status=IdentityStatus.active,
        )
        mock_uow.rbac.get_permission_names.return_value = set(permissions)

    return _grant
