from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from credentialing.domain.entities import ProvisionalApplication, WorkflowState


class IProvisionalApplicationRepository(ABC):
    """ProvisionalApplication repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, application_id: UUID) -> Optional[ProvisionalApplication]:
        """Get application by ID, reloading any stale in-session copy"""
        pass

    @abstractmethod
    async def get_latest_for_subject(
        self, external_subject_id: str
    ) -> Optional[ProvisionalApplication]:
        """Get the highest submission_number application of a subject"""
        pass

    @abstractmethod
    async def find_open_by_email(
        self, email: str, exclude_subject_id: Optional[str] = None
    ) -> Optional[ProvisionalApplication]:
        """Find a non-rejected application holding this email"""
        pass

    @abstractmethod
    async def find_open_by_phone(
        self, phone_number: str, exclude_subject_id: Optional[str] = None
    ) -> Optional[ProvisionalApplication]:
        """Find a non-rejected application holding this phone number"""
        pass

    @abstractmethod
    async def find_open_by_license(
        self,
        license_number: str,
        license_state: str,
        exclude_subject_id: Optional[str] = None,
    ) -> Optional[ProvisionalApplication]:
        """Find a non-rejected application holding this license"""
        pass

    @abstractmethod
    async def create(self, application: ProvisionalApplication) -> ProvisionalApplication:
        """Create a new application"""
        pass

    @abstractmethod
    async def update(self, application: ProvisionalApplication) -> ProvisionalApplication:
        """Update existing application"""
        pass

    @abstractmethod
    async def claim_transition(
        self,
        application_id: UUID,
        target: WorkflowState,
        allowed_sources: Iterable[WorkflowState],
        values: Optional[Dict[str, Any]] = None,
    ) -> Optional[WorkflowState]:
        """
        Move an application to target only if it is currently in allowed_sources.

        Single conditional UPDATE; exactly one of several concurrent callers
        can win the claim. The same statement copies the replaced state into
        previous_workflow_state.

        Returns:
            The state the application moved from, or None if nothing was claimed
        """
        pass

    @abstractmethod
    async def list_pending(
        self, state: Optional[WorkflowState] = None, limit: int = 50, offset: int = 0
    ) -> Tuple[List[ProvisionalApplication], int]:
        """
        List non-terminal applications, oldest first.

        Returns:
            Tuple of (applications page, total matching count)
        """
        pass
