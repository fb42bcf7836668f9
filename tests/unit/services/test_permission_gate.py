import pytest

from credentialing.app.services.permission_gate import PermissionGate
from credentialing.domain.context import Principal
from credentialing.domain.entities import Identity, IdentityStatus


@pytest.mark.asyncio
async def test_principal_without_identity_holds_no_permissions(mock_uow):
    gate = PermissionGate(mock_uow)
    principal = Principal(subject_id="stranger")

    assert await gate.permissions_for(principal) == set()
    mock_uow.rbac.get_permission_names.assert_not_called()


@pytest.mark.asyncio
async def test_suspended_identity_holds_no_permissions(mock_uow):
    mock_uow.identities.get_by_subject.return_value = Identity(
        external_subject_id="suspended", email="s@example.com", status=IdentityStatus.suspended
    )
    mock_uow.rbac.get_permission_names.return_value = {"therapists.approve"}

    gate = PermissionGate(mock_uow)

    assert not await gate.has_permission(Principal("suspended"), "therapists.approve")


@pytest.mark.asyncio
async def test_permissions_are_resolved_once_per_gate(mock_uow, admin, grant):
    grant("therapists.read", "therapists.approve")
    gate = PermissionGate(mock_uow)

    assert await gate.has_permission(admin, "therapists.read")
    assert await gate.has_all(admin, ["therapists.read", "therapists.approve"])
    assert await gate.has_any(admin, ["system.audit", "therapists.approve"])
    assert not await gate.has_any(admin, ["system.audit", "users.delete"])

    mock_uow.identities.get_by_subject.assert_awaited_once()
    mock_uow.rbac.get_permission_names.assert_awaited_once()


@pytest.mark.asyncio
async def test_authorize_reports_missing_permission(mock_uow, admin, grant):
    grant("therapists.read")

    result = await PermissionGate(mock_uow).authorize(admin, "therapists.approve")

    assert result.is_err()
    assert result.error.code == "PERMISSION_DENIED"
    assert result.error.details == {"required_permission": "therapists.approve"}


@pytest.mark.asyncio
async def test_authorize_passes_with_permission(mock_uow, admin, grant):
    grant("therapists.approve")

    result = await PermissionGate(mock_uow).authorize(admin, "therapists.approve")

    assert result.is_ok()
