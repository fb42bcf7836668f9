"""
Transition Application Use Case

Admin actions on the review pipeline: advance, initiate background check,
approve and reject.
"""

from typing import Optional
from uuid import UUID

from credentialing.app.services.unit_of_work import UnitOfWork
from credentialing.app.services.workflow_state_machine import WorkflowStateMachine
from credentialing.domain.context import Principal, RequestContext
from credentialing.domain.entities import WorkflowState
from credentialing.libs.result import Error, Result, Return

from .dtos import TransitionResponse

TRANSITION_MESSAGES = {
    WorkflowState.documents_review: "Application moved to documents review",
    WorkflowState.background_check: "Background check initiated successfully",
    WorkflowState.final_review: "Application moved to final review",
    WorkflowState.approved: "Therapist account activated with comprehensive data migration",
    WorkflowState.rejected: "Therapist registration rejected",
}


class TransitionApplicationUseCase:
    """
    Use case for moving an application through the review pipeline.

    Business Rules:
    - Target must be a reviewable stage (not registration_submitted)
    - All rules of WorkflowStateMachine apply
    - A repeated approval reports already_applied instead of failing
    """

    def __init__(self, uow: UnitOfWork, config):
        self.uow = uow
        self.config = config

    async def execute(
        self,
        application_id: UUID,
        target: str,
        principal: Principal,
        reason: Optional[str] = None,
        context: Optional[RequestContext] = None,
    ) -> Result[TransitionResponse]:
        try:
            target_state = WorkflowState(target)
        except ValueError:
            return Return.err(Error("INVALID_TARGET_STAGE", f"Unknown stage: {target}"))

        machine = WorkflowStateMachine(self.uow, self.config)
        result = await machine.transition(application_id, target_state, principal, reason, context)
        if result.is_err():
            return result

        outcome = result.value
        message = TRANSITION_MESSAGES[outcome.state]
        if outcome.already_applied:
            message = "Application was already approved"

        return Return.ok(
            TransitionResponse(
                application_id=str(outcome.application_id),
                previous_status=outcome.previous_state.registration_label,
                status=outcome.state.registration_label,
                workflow_stage=outcome.state.value,
                identity_id=str(outcome.identity_id) if outcome.identity_id else None,
                already_applied=outcome.already_applied,
                message=message,
            )
        )
