from datetime import date

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from credentialing.app.use_cases.verification import (
    InviteRegistrationCommand,
    RegisterApplicationCommand,
    RegisterApplicationUseCase,
    parse_registration,
)
from credentialing.domain.entities import Identity, ProvisionalApplication, WorkflowState


def make_command(**overrides):
    data = {
        "externalSubjectId": "applicant-sub",
        "email": "Applicant@Example.com",
        "phoneNumber": "+15550003333",
        "firstName": "Grace",
        "lastName": "Hopper",
        "licenseNumber": "LCSW-42",
        "licenseState": "WA",
        "backgroundCheckConsent": True,
    }
    data.update(overrides)
    return RegisterApplicationCommand.model_validate(data)


def make_application(state: WorkflowState, submission_number: int = 1):
    return ProvisionalApplication(
        external_subject_id="applicant-sub",
        email="applicant@example.com",
        first_name="Grace",
        last_name="Hopper",
        license_number="LCSW-42",
        license_state="WA",
        workflow_state=state,
        submission_number=submission_number,
    )


@pytest.mark.asyncio
async def test_first_submission_creates_application(mock_uow, config):
    result = await RegisterApplicationUseCase(mock_uow, config).execute(make_command())

    assert result.is_ok()
    response = result.value
    assert response.created is True
    assert response.status == "pending_review"
    assert response.workflow_stage == "registration_submitted"
    assert response.submission_number == 1
    assert response.can_login is False

    application = mock_uow.applications.create.call_args.args[0]
    assert application.email == "applicant@example.com"
    assert application.external_subject_type == config.EXTERNAL_SUBJECT_TYPE
    assert application.background_check_consent_date is not None
    assert mock_uow.workflow_log.create.call_args.args[0].action == "registration_created"
    mock_uow.compliance_audit.create.assert_awaited_once()
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_missing_expiry_dates_fall_back_to_default(mock_uow, config):
    await RegisterApplicationUseCase(mock_uow, config).execute(
        make_command(licenseExpiry="2028-01-31")
    )

    application = mock_uow.applications.create.call_args.args[0]
    assert application.license_expiry == date(2028, 1, 31)
    assert application.malpractice_expiry == date.fromisoformat(config.DEFAULT_DOCUMENT_EXPIRY)


@pytest.mark.asyncio
async def test_pending_submission_is_overwritten(mock_uow, config):
    latest = make_application(WorkflowState.registration_submitted)
    mock_uow.applications.get_latest_for_subject.return_value = latest

    result = await RegisterApplicationUseCase(mock_uow, config).execute(
        make_command(lastName="Hopper-Murray")
    )

    assert result.is_ok()
    assert result.value.created is False
    assert result.value.application_id == str(latest.id)
    assert latest.last_name == "Hopper-Murray"
    mock_uow.applications.create.assert_not_called()
    assert mock_uow.workflow_log.create.call_args.args[0].action == "registration_updated"


@pytest.mark.asyncio
async def test_resubmission_after_rejection_creates_next_submission(mock_uow, config):
    mock_uow.applications.get_latest_for_subject.return_value = make_application(
        WorkflowState.rejected, submission_number=2
    )

    result = await RegisterApplicationUseCase(mock_uow, config).execute(make_command())

    assert result.value.created is True
    assert result.value.submission_number == 3


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "state, code",
    [
        (WorkflowState.approved, "APPLICATION_ALREADY_APPROVED"),
        (WorkflowState.documents_review, "APPLICATION_UNDER_REVIEW"),
        (WorkflowState.background_check, "APPLICATION_UNDER_REVIEW"),
        (WorkflowState.final_review, "APPLICATION_UNDER_REVIEW"),
    ],
)
async def test_latest_submission_blocks_registration(mock_uow, config, state, code):
    mock_uow.applications.get_latest_for_subject.return_value = make_application(state)

    result = await RegisterApplicationUseCase(mock_uow, config).execute(make_command())

    assert result.error.code == code
    mock_uow.applications.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_active_identity_blocks_registration(mock_uow, config):
    mock_uow.identities.get_by_subject.return_value = Identity(
        external_subject_id="applicant-sub", email="applicant@example.com"
    )

    result = await RegisterApplicationUseCase(mock_uow, config).execute(make_command())

    assert result.error.code == "APPLICATION_ALREADY_APPROVED"


@pytest.mark.asyncio
async def test_email_of_other_identity_is_duplicate(mock_uow, config):
    mock_uow.identities.get_by_email.return_value = Identity(
        external_subject_id="someone-else", email="applicant@example.com"
    )

    result = await RegisterApplicationUseCase(mock_uow, config).execute(make_command())

    assert result.error.code == "DUPLICATE_REGISTRATION"
    assert result.error.details == {"field": "email"}


@pytest.mark.asyncio
async def test_license_held_by_other_subject_is_duplicate(mock_uow, config):
    mock_uow.applications.find_open_by_license.return_value = make_application(
        WorkflowState.documents_review
    )

    result = await RegisterApplicationUseCase(mock_uow, config).execute(make_command())

    assert result.error.code == "DUPLICATE_REGISTRATION"
    assert result.error.details == {"field": "license"}
    mock_uow.applications.find_open_by_license.assert_awaited_once_with(
        "LCSW-42", "WA", "applicant-sub"
    )


@pytest.mark.asyncio
async def test_lost_insert_race_is_duplicate(mock_uow, config):
    mock_uow.applications.create.side_effect = IntegrityError(
        "INSERT INTO provisional_applications", {}, Exception("UNIQUE constraint failed")
    )

    result = await RegisterApplicationUseCase(mock_uow, config).execute(make_command())

    assert result.error.code == "DUPLICATE_REGISTRATION"
    mock_uow.rollback.assert_awaited_once()


def test_invite_payload_skips_license_fields():
    command = parse_registration(
        {
            "externalSubjectId": "invitee-sub",
            "email": "Invitee@Example.com",
            "firstName": "Ines",
            "lastName": "Moreau",
            "orgInviteCode": " ORG-ABCDEF123456 ",
        }
    )

    assert isinstance(command, InviteRegistrationCommand)
    assert command.email == "invitee@example.com"
    assert command.org_invite_code == "ORG-ABCDEF123456"


def test_payload_without_invite_requires_license_fields():
    with pytest.raises(ValidationError) as exc_info:
        parse_registration(
            {
                "externalSubjectId": "applicant-sub",
                "email": "applicant@example.com",
                "firstName": "Grace",
                "lastName": "Hopper",
                "orgInviteCode": "",
            }
        )

    missing = {error["loc"][0] for error in exc_info.value.errors()}
    assert missing == {"licenseNumber", "licenseState"}


@pytest.mark.asyncio
async def test_invite_command_takes_fast_path(mock_uow, config):
    command = InviteRegistrationCommand(
        external_subject_id="invitee-sub",
        email="invitee@example.com",
        first_name="Ines",
        last_name="Moreau",
        org_invite_code="ORG-ABCDEF123456",
    )
    mock_uow.invites.get_by_code.return_value = None

    result = await RegisterApplicationUseCase(mock_uow, config).execute(command)

    assert result.error.code == "INVITE_NO_LONGER_VALID"
    mock_uow.applications.create.assert_not_called()
