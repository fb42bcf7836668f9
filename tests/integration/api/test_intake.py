from datetime import date
from uuid import UUID

import pytest
from httpx import AsyncClient

from credentialing.domain.entities import (
    ComplianceAuditEntry,
    ProvisionalApplication,
    WorkflowLogEntry,
    WorkflowState,
)
from tests.fixtures.helpers import API, count_rows, fetch_all, fetch_one


@pytest.mark.asyncio
async def test_check_duplicate_then_register_once(client: AsyncClient, session_factory, test_data):
    """Availability check followed by exactly one successful registration"""
    payload = test_data.application()

    check = await client.post(
        f"{API}/check-duplicate",
        json={"email": payload["email"], "phoneNumber": payload["phoneNumber"]},
    )
    assert check.status_code == 200
    body = check.json()
    assert body["success"] is True
    assert body["data"] == {
        "emailExists": False,
        "phoneExists": False,
        "message": "Email and phone number are available",
    }

    response = await client.post(f"{API}/register", json=payload)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "pending_review"
    assert data["workflowStage"] == "registration_submitted"
    assert data["submissionNumber"] == 1
    assert data["created"] is True
    assert data["canLogin"] is False

    assert await count_rows(session_factory, ProvisionalApplication) == 1

    # Another subject can no longer take the same email
    again = await client.post(
        f"{API}/register",
        json=test_data.application(externalSubjectId="cognito-sub-other", phoneNumber=None),
    )
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "DUPLICATE_REGISTRATION"
    assert again.json()["error"]["details"] == {"field": "email"}

    check = await client.post(f"{API}/check-duplicate", json={"email": "jane.doe@example.com"})
    assert check.json()["data"]["emailExists"] is True


@pytest.mark.asyncio
async def test_check_duplicate_requires_email_or_phone(client: AsyncClient):
    response = await client.post(f"{API}/check-duplicate", json={})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["requestId"]


@pytest.mark.asyncio
async def test_register_rejects_malformed_payload(client: AsyncClient, test_data):
    payload = test_data.application(email="not-an-email")
    del payload["licenseNumber"]

    response = await client.post(f"{API}/register", json=payload)

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    fields = {item["field"] for item in error["details"]["errors"]}
    assert {"email", "licenseNumber"} <= fields


@pytest.mark.asyncio
async def test_register_stores_normalized_application(
    client: AsyncClient, session_factory, registered
):
    application = await fetch_one(
        session_factory,
        ProvisionalApplication,
        ProvisionalApplication.id == UUID(registered["applicationId"]),
    )

    assert application.email == "jane.doe@example.com"
    assert application.license_expiry == date(2027, 6, 30)
    # No malpractice expiry supplied
    assert application.malpractice_expiry == date(2099, 12, 31)
    assert application.languages_spoken == ["English", "Spanish"]
    assert application.clinical_specialties == {"anxiety": True, "trauma": True}
    assert application.background_check_consent_date is not None

    workflow = await fetch_all(
        session_factory, WorkflowLogEntry, WorkflowLogEntry.application_id == application.id
    )
    assert [entry.action for entry in workflow] == ["registration_created"]
    assert await count_rows(
        session_factory,
        ComplianceAuditEntry,
        ComplianceAuditEntry.resource_id == str(application.id),
    ) == 1


@pytest.mark.asyncio
async def test_resubmitting_pending_registration_updates_in_place(
    client: AsyncClient, session_factory, test_data, registered
):
    response = await client.post(
        f"{API}/register", json=test_data.application(city="Oakland", licenseExpiry=None)
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["created"] is False
    assert data["applicationId"] == registered["applicationId"]

    applications = await fetch_all(session_factory, ProvisionalApplication)
    assert len(applications) == 1
    assert applications[0].city == "Oakland"
    assert applications[0].license_expiry == date(2099, 12, 31)


@pytest.mark.asyncio
async def test_resubmission_after_rejection_creates_new_application(
    client: AsyncClient, session_factory, test_data, admin_headers, registered
):
    rejected = await client.post(
        f"{API}/{registered['applicationId']}/reject",
        json={"reason": "License could not be verified"},
        headers=admin_headers,
    )
    assert rejected.status_code == 200

    response = await client.post(f"{API}/register", json=test_data.application())

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["created"] is True
    assert data["submissionNumber"] == 2
    assert data["applicationId"] != registered["applicationId"]

    applications = await fetch_all(
        session_factory,
        ProvisionalApplication,
        order_by=ProvisionalApplication.submission_number,
    )
    assert [a.workflow_state for a in applications] == [
        WorkflowState.rejected,
        WorkflowState.registration_submitted,
    ]
    assert applications[0].rejection_reason == "License could not be verified"


@pytest.mark.asyncio
async def test_rejected_application_does_not_block_duplicate_check(
    client: AsyncClient, test_data, admin_headers, registered
):
    payload = test_data.application()
    await client.post(
        f"{API}/{registered['applicationId']}/reject",
        json={"reason": "License could not be verified"},
        headers=admin_headers,
    )

    check = await client.post(
        f"{API}/check-duplicate",
        json={"email": payload["email"], "phoneNumber": payload["phoneNumber"]},
    )

    assert check.status_code == 200
    data = check.json()["data"]
    assert data["emailExists"] is False
    assert data["phoneExists"] is False


@pytest.mark.asyncio
async def test_register_while_under_review(
    client: AsyncClient, test_data, admin_headers, registered
):
    advanced = await client.post(
        f"{API}/{registered['applicationId']}/advance",
        json={"targetStage": "documents_review"},
        headers=admin_headers,
    )
    assert advanced.status_code == 200

    response = await client.post(f"{API}/register", json=test_data.application())

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "APPLICATION_UNDER_REVIEW"


@pytest.mark.asyncio
async def test_register_after_approval(client: AsyncClient, test_data, admin_headers, registered):
    approved = await client.post(
        f"{API}/{registered['applicationId']}/approve", headers=admin_headers
    )
    assert approved.status_code == 200

    response = await client.post(f"{API}/register", json=test_data.application())

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "APPLICATION_ALREADY_APPROVED"


@pytest.mark.asyncio
async def test_license_taken_by_other_subject(client: AsyncClient, test_data, registered):
    payload = test_data.application(
        "second_application", licenseNumber="PSY-12345", licenseState="CA"
    )

    response = await client.post(f"{API}/register", json=payload)

    assert response.status_code == 409
    assert response.json()["error"]["details"] == {"field": "license"}


@pytest.mark.asyncio
async def test_registration_status_lifecycle(
    client: AsyncClient, admin_headers, test_data
):
    subject = test_data.application()["externalSubjectId"]

    missing = await client.get(f"{API}/status/{subject}")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "REGISTRATION_NOT_FOUND"

    registered = (await client.post(f"{API}/register", json=test_data.application())).json()
    application_id = registered["data"]["applicationId"]

    pending = (await client.get(f"{API}/status/{subject}")).json()["data"]
    assert pending["status"] == "pending_review"
    assert pending["workflowStage"] == "registration_submitted"
    assert pending["backgroundCheckStatus"] == "not_started"
    assert pending["canLogin"] is False

    await client.post(f"{API}/{application_id}/background-check", headers=admin_headers)
    checking = (await client.get(f"{API}/status/{subject}")).json()
    assert checking["data"]["status"] == "background_check"
    assert checking["data"]["backgroundCheckStatus"] == "pending"
    assert checking["message"] == "Background check in progress. This may take 2-5 business days."

    await client.post(f"{API}/{application_id}/approve", headers=admin_headers)
    active = (await client.get(f"{API}/status/{subject}")).json()["data"]
    assert active["status"] == "active"
    assert active["canLogin"] is True
    assert active["identityId"]
