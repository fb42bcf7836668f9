from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from credentialing.app.services.workflow_state_machine import (
    WorkflowStateMachine,
    allowed_sources,
    can_transition,
)
from credentialing.domain.entities import (
    BackgroundCheckStatus,
    ProvisionalApplication,
    WorkflowState,
)


def make_application(state: WorkflowState = WorkflowState.registration_submitted, **kwargs):
    return ProvisionalApplication(
        external_subject_id="applicant-sub",
        email="applicant@example.com",
        first_name="Ada",
        last_name="Lovelace",
        license_number="PSY-1",
        license_state="CA",
        workflow_state=state,
        **kwargs,
    )


def test_review_stages_only_move_forward():
    assert allowed_sources(WorkflowState.documents_review) == [
        WorkflowState.registration_submitted
    ]
    assert can_transition(WorkflowState.registration_submitted, WorkflowState.final_review)
    assert can_transition(WorkflowState.documents_review, WorkflowState.background_check)
    assert not can_transition(WorkflowState.final_review, WorkflowState.documents_review)
    assert not can_transition(WorkflowState.background_check, WorkflowState.background_check)


def test_terminal_states_reachable_from_any_open_stage_only():
    for target in (WorkflowState.approved, WorkflowState.rejected):
        assert set(allowed_sources(target)) == {
            WorkflowState.registration_submitted,
            WorkflowState.documents_review,
            WorkflowState.background_check,
            WorkflowState.final_review,
        }
        assert not can_transition(WorkflowState.approved, target)
        assert not can_transition(WorkflowState.rejected, target)


def test_nothing_enters_registration_submitted():
    assert allowed_sources(WorkflowState.registration_submitted) == []


@pytest.mark.asyncio
async def test_permission_denied_reads_nothing(mock_uow, config, admin, grant):
    grant("therapists.read")

    result = await WorkflowStateMachine(mock_uow, config).transition(
        uuid4(), WorkflowState.approved, admin
    )

    assert result.is_err()
    assert result.error.code == "PERMISSION_DENIED"
    mock_uow.applications.get_by_id.assert_not_called()
    mock_uow.applications.claim_transition.assert_not_called()


@pytest.mark.asyncio
async def test_registration_submitted_is_not_a_target(mock_uow, config, admin, grant):
    grant("therapists.update", "therapists.approve")

    result = await WorkflowStateMachine(mock_uow, config).transition(
        uuid4(), WorkflowState.registration_submitted, admin
    )

    assert result.error.code == "INVALID_TARGET_STAGE"


@pytest.mark.asyncio
async def test_reject_requires_reason(mock_uow, config, admin, grant):
    grant("therapists.approve")

    result = await WorkflowStateMachine(mock_uow, config).transition(
        uuid4(), WorkflowState.rejected, admin, reason="   "
    )

    assert result.error.code == "REJECTION_REASON_REQUIRED"
    mock_uow.applications.claim_transition.assert_not_called()


@pytest.mark.asyncio
async def test_reject_claims_and_records(mock_uow, config, admin, grant):
    grant("therapists.approve")
    application = make_application(WorkflowState.documents_review)
    mock_uow.applications.get_by_id.return_value = application
    mock_uow.applications.claim_transition.return_value = WorkflowState.documents_review

    result = await WorkflowStateMachine(mock_uow, config).transition(
        application.id, WorkflowState.rejected, admin, reason=" License expired "
    )

    assert result.is_ok()
    assert result.value.previous_state == WorkflowState.documents_review
    assert result.value.state == WorkflowState.rejected

    _, target, sources, values = mock_uow.applications.claim_transition.call_args.args
    assert target == WorkflowState.rejected
    assert WorkflowState.documents_review in sources
    assert values["rejection_reason"] == "License expired"
    assert values["rejected_by"] == admin.subject_id

    workflow_entry = mock_uow.workflow_log.create.call_args.args[0]
    assert workflow_entry.action == "application_rejected"
    assert workflow_entry.details["reason"] == "License expired"
    compliance_entry = mock_uow.compliance_audit.create.call_args.args[0]
    assert compliance_entry.old_values == {"status": "documents_review"}
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_background_check_marks_vendor_check_pending(mock_uow, config, admin, grant):
    grant("therapists.update")
    application = make_application(WorkflowState.documents_review)
    mock_uow.applications.get_by_id.return_value = application
    mock_uow.applications.claim_transition.return_value = WorkflowState.documents_review

    result = await WorkflowStateMachine(mock_uow, config).transition(
        application.id, WorkflowState.background_check, admin
    )

    assert result.is_ok()
    values = mock_uow.applications.claim_transition.call_args.args[3]
    assert values["background_check_status"] == BackgroundCheckStatus.pending
    assert values["background_check_requested_at"] is not None


@pytest.mark.asyncio
async def test_advance_without_compliance_entry(mock_uow, config, admin, grant):
    grant("therapists.update")
    application = make_application()
    mock_uow.applications.get_by_id.return_value = application
    mock_uow.applications.claim_transition.return_value = WorkflowState.registration_submitted

    result = await WorkflowStateMachine(mock_uow, config).transition(
        application.id, WorkflowState.documents_review, admin
    )

    assert result.is_ok()
    mock_uow.workflow_log.create.assert_awaited_once()
    mock_uow.compliance_audit.create.assert_not_called()


@pytest.mark.asyncio
async def test_missing_application(mock_uow, config, admin, grant):
    grant("therapists.update")
    mock_uow.applications.get_by_id.return_value = None

    result = await WorkflowStateMachine(mock_uow, config).transition(
        uuid4(), WorkflowState.documents_review, admin
    )

    assert result.error.code == "APPLICATION_NOT_FOUND"


@pytest.mark.asyncio
async def test_repeated_approval_is_idempotent(mock_uow, config, admin, grant):
    grant("therapists.approve")
    identity_id = uuid4()
    application = make_application(WorkflowState.approved, identity_id=identity_id)
    mock_uow.applications.get_by_id.return_value = application
    mock_uow.applications.claim_transition.return_value = None

    result = await WorkflowStateMachine(mock_uow, config).transition(
        application.id, WorkflowState.approved, admin
    )

    assert result.is_ok()
    assert result.value.already_applied is True
    assert result.value.identity_id == identity_id
    mock_uow.identities.create.assert_not_called()
    mock_uow.workflow_log.create.assert_not_called()


@pytest.mark.asyncio
async def test_terminal_application_is_finalized(mock_uow, config, admin, grant):
    grant("therapists.approve")
    application = make_application(WorkflowState.rejected)
    mock_uow.applications.get_by_id.return_value = application
    mock_uow.applications.claim_transition.return_value = None

    result = await WorkflowStateMachine(mock_uow, config).transition(
        application.id, WorkflowState.approved, admin
    )

    assert result.error.code == "APPLICATION_FINALIZED"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_backward_move_is_invalid(mock_uow, config, admin, grant):
    grant("therapists.update")
    application = make_application(WorkflowState.final_review)
    mock_uow.applications.get_by_id.return_value = application
    mock_uow.applications.claim_transition.return_value = None

    result = await WorkflowStateMachine(mock_uow, config).transition(
        application.id, WorkflowState.documents_review, admin
    )

    assert result.error.code == "INVALID_TRANSITION"
    assert result.error.details == {
        "current_state": "final_review",
        "target_state": "documents_review",
    }


@pytest.mark.asyncio
async def test_storage_failure_rolls_back(mock_uow, config, admin, grant):
    grant("therapists.update")
    mock_uow.applications.get_by_id.return_value = make_application()
    mock_uow.applications.claim_transition.side_effect = OperationalError(
        "UPDATE provisional_applications", {}, Exception("database is locked")
    )

    result = await WorkflowStateMachine(mock_uow, config).transition(
        uuid4(), WorkflowState.documents_review, admin
    )

    assert result.error.code == "TRANSIENT_STORAGE_ERROR"
    mock_uow.rollback.assert_awaited()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_audit_uses_state_replaced_by_claim(mock_uow, config, admin, grant):
    # Another reviewer advanced the row after it was listed; the claim reports the real source
    grant("therapists.approve")
    application = make_application(
        WorkflowState.rejected, previous_workflow_state=WorkflowState.final_review
    )
    mock_uow.applications.get_by_id.return_value = application
    mock_uow.applications.claim_transition.return_value = WorkflowState.final_review

    result = await WorkflowStateMachine(mock_uow, config).transition(
        application.id, WorkflowState.rejected, admin, reason="Incomplete references"
    )

    assert result.value.previous_state == WorkflowState.final_review
    workflow_entry = mock_uow.workflow_log.create.call_args.args[0]
    assert workflow_entry.details["from"] == "final_review"
    compliance_entry = mock_uow.compliance_audit.create.call_args.args[0]
    assert compliance_entry.old_values == {"status": "final_review"}
