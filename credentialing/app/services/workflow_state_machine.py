"""
Workflow State Machine

Moves provisional applications through the admin review pipeline:

    registration_submitted -> documents_review -> background_check
        -> final_review -> approved | rejected

Every move is a conditional claim on the current state, so concurrent
admins can never both apply the same transition.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from credentialing.app.services.activation_transaction import ActivationTransaction
from credentialing.app.services.audit_trail import AuditTrail
from credentialing.app.services.permission_gate import PermissionGate
from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.domain.base import utcnow
from credentialing.domain.context import Principal, RequestContext
from credentialing.domain.entities import (
    REVIEW_PIPELINE,
    TERMINAL_STATES,
    ActorType,
    BackgroundCheckStatus,
    ComplianceLevel,
    WorkflowState,
)
from credentialing.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

STAGE_PERMISSIONS = {
    WorkflowState.documents_review: "therapists.update",
    WorkflowState.background_check: "therapists.update",
    WorkflowState.final_review: "therapists.update",
    WorkflowState.approved: "therapists.approve",
    WorkflowState.rejected: "therapists.approve",
}

TRANSITION_ACTIONS = {
    WorkflowState.documents_review: "documents_review_started",
    WorkflowState.background_check: "background_check_initiated",
    WorkflowState.final_review: "final_review_started",
    WorkflowState.approved: "application_approved",
    WorkflowState.rejected: "application_rejected",
}

# Transitions that touch PII-bearing state and need a compliance entry
COMPLIANCE_TRANSITIONS = frozenset(
    {WorkflowState.background_check, WorkflowState.approved, WorkflowState.rejected}
)


def allowed_sources(target: WorkflowState) -> List[WorkflowState]:
    """States from which target may be entered."""
    if target in TERMINAL_STATES:
        return list(REVIEW_PIPELINE)
    if target not in REVIEW_PIPELINE:
        return []
    return list(REVIEW_PIPELINE[: REVIEW_PIPELINE.index(target)])


def can_transition(source: WorkflowState, target: WorkflowState) -> bool:
    return source in allowed_sources(target)


@dataclass
class TransitionOutcome:
    """Snapshot of an application after a transition"""

    application_id: UUID
    previous_state: WorkflowState
    state: WorkflowState
    identity_id: Optional[UUID] = None
    already_applied: bool = False


class WorkflowStateMachine:
    """
    Applies review transitions to a provisional application.

    Business Rules:
    - documents_review, background_check, final_review: forward only, skipping allowed
    - approved, rejected: from any non-terminal state
    - Stage permission checked before anything is read or written
    - rejected requires a non-blank reason
    - background_check marks the vendor check pending and returns immediately
    - approved activates the account in the same transaction as the claim
    - Approving an approved application is an idempotent success
    - Storage failures roll everything back and surface as TRANSIENT_STORAGE_ERROR
    """

    def __init__(self, uow: UnitOfWork, config):
        self.uow = uow
        self.config = config

    async def transition(
        self,
        application_id: UUID,
        target: WorkflowState,
        principal: Principal,
        reason: Optional[str] = None,
        context: Optional[RequestContext] = None,
    ) -> Result[TransitionOutcome]:
        if target not in STAGE_PERMISSIONS:
            return Return.err(
                Error("INVALID_TARGET_STAGE", f"Cannot transition to {target.value}")
            )

        async with self.uow:
            gate = PermissionGate(self.uow)
            authorized = await gate.authorize(principal, STAGE_PERMISSIONS[target])
            if authorized.is_err():
                return authorized

            if target == WorkflowState.rejected and not (reason and reason.strip()):
                return Return.err(
                    Error("REJECTION_REASON_REQUIRED", "A rejection reason is required")
                )

            try:
                result = await self._apply(application_id, target, principal, reason, context)
                if result.is_err():
                    await self.uow.rollback()
                    return result
                await self.uow.commit()
            except SQLAlchemyError as exc:
                await self.uow.rollback()
                logger.error(
                    f"Transition of application {application_id} to {target.value} failed: {exc}"
                )
                return Return.err(
                    Error(
                        "TRANSIENT_STORAGE_ERROR",
                        "Storage temporarily unavailable, please retry",
                    )
                )

            outcome = result.value
            if not outcome.already_applied:
                logger.info(
                    f"Application {application_id} moved "
                    f"{outcome.previous_state.value} -> {outcome.state.value}"
                )
            return result

    async def _apply(
        self,
        application_id: UUID,
        target: WorkflowState,
        principal: Principal,
        reason: Optional[str],
        context: Optional[RequestContext],
    ) -> Result[TransitionOutcome]:
        now = utcnow()
        values = {}
        if target == WorkflowState.background_check:
            values = {
                "background_check_status": BackgroundCheckStatus.pending,
                "background_check_requested_at": now,
            }
        elif target == WorkflowState.rejected:
            values = {
                "rejected_at": now,
                "rejected_by": principal.subject_id,
                "rejection_reason": reason.strip(),
            }

        previous_state = await self.uow.applications.claim_transition(
            application_id, target, allowed_sources(target), values
        )
        application = await self.uow.applications.get_by_id(application_id)

        if previous_state is None:
            return self._claim_refused(application_id, application, target)

        identity_id = None
        if target == WorkflowState.approved:
            activation = await ActivationTransaction(self.uow, self.config).activate(
                application, principal, previous_state, context
            )
            if activation.is_err():
                return activation
            identity_id = activation.value.identity.id

        audit = AuditTrail(self.uow)
        details = {"from": previous_state.value, "to": target.value}
        if target == WorkflowState.rejected:
            details["reason"] = reason.strip()
        await audit.record_workflow(
            stage=target.value,
            action=TRANSITION_ACTIONS[target],
            application_id=application_id,
            identity_id=identity_id,
            actor_type=ActorType.admin,
            actor=principal,
            details=details,
        )

        if target in COMPLIANCE_TRANSITIONS:
            new_values = {"status": target.registration_label}
            if target == WorkflowState.rejected:
                new_values["rejection_reason"] = reason.strip()
            await audit.record_compliance(
                action="application_status_changed",
                resource_type="provisional_application",
                resource_id=str(application_id),
                old_values={"status": previous_state.registration_label},
                new_values=new_values,
                actor_type=ActorType.admin,
                actor=principal,
                context=context,
                compliance_level=ComplianceLevel.pii,
            )

        return Return.ok(
            TransitionOutcome(
                application_id=application_id,
                previous_state=previous_state,
                state=target,
                identity_id=identity_id,
            )
        )

    def _claim_refused(self, application_id, application, target) -> Result[TransitionOutcome]:
        if application is None:
            return Return.err(Error("APPLICATION_NOT_FOUND", "Application not found"))

        state = application.workflow_state
        if state == WorkflowState.approved and target == WorkflowState.approved:
            return Return.ok(
                TransitionOutcome(
                    application_id=application_id,
                    previous_state=state,
                    state=state,
                    identity_id=application.identity_id,
                    already_applied=True,
                )
            )
        if state in TERMINAL_STATES:
            return Return.err(
                Error(
                    "APPLICATION_FINALIZED",
                    f"Application is already {state.value}",
                    {"current_state": state.value},
                )
            )
        return Return.err(
            Error(
                "INVALID_TRANSITION",
                f"Cannot move application from {state.value} to {target.value}",
                {"current_state": state.value, "target_state": target.value},
            )
        )
