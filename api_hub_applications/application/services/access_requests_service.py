"""
Access request service.

Creates access requests for production scopes and records the approver's
decision. Approval grants the requested scopes to the application's
credentials in the request's environment.

Dependencies: api_hub_applications.boundary.db.CRUD.access_request_crud
System role: Access request use cases
"""

import logging

from api_hub_applications.application.helpers.notifications import notify
from api_hub_applications.application.services.access_requests_event_service import AccessRequestsEventService
from api_hub_applications.application.services.applications_credentials_service import ApplicationsCredentialsService
from api_hub_applications.application.services.applications_search_service import ApplicationsSearchService
from api_hub_applications.boundary.connectors.email_connector import EmailConnector
from api_hub_applications.boundary.db.CRUD.access_request_crud import AccessRequestCRUD
from api_hub_applications.core.exceptions import AccessRequestNotFoundException, AccessRequestStatusInvalidException
from api_hub_applications.models.access_request import (
    AccessRequest,
    AccessRequestDecisionRequest,
    AccessRequestRequest,
    AccessRequestStatus,
    cancel,
    set_decision,
    set_status,
)
from api_hub_applications.models.common import utc_now

logger = logging.getLogger(__name__)


class AccessRequestsService:
    """Access request creation and decisions."""

    def __init__(
        self,
        repository: AccessRequestCRUD,
        search_service: ApplicationsSearchService,
        credentials_service: ApplicationsCredentialsService,
        email: EmailConnector,
        event_service: AccessRequestsEventService,
        clock=utc_now,
    ) -> None:
        self.repository = repository
        self.search_service = search_service
        self.credentials_service = credentials_service
        self.email = email
        self.event_service = event_service
        self.clock = clock

    async def create_access_requests(self, request: AccessRequestRequest) -> list[AccessRequest]:
        """
        Raise one PENDING access request per API.

        Args:
            request: Requested APIs and supporting information

        Returns:
            list[AccessRequest]: Saved access requests

        Raises:
            ApplicationNotFoundException: If the requesting application does not exist
        """
        application = await self.search_service.find_by_id(request.application_id)

        now = self.clock()
        saved = await self.repository.insert(request.to_access_requests(now))
        logger.info(
            "Access requests created",
            extra={"application_id": request.application_id, "count": len(saved)},
        )

        for access_request in saved:
            await notify(
                self.email.send_access_request_submitted_email_to_requester(application, access_request),
                "access request submitted",
            )
            await notify(
                self.email.send_new_access_request_email_to_approvers(application, access_request),
                "new access request",
            )
        await self.event_service.create(saved, request.requested_by, now)

        return saved

    async def get_access_requests(
        self,
        application_id: str | None = None,
        status: AccessRequestStatus | None = None,
    ) -> list[AccessRequest]:
        return await self.repository.find_requests(application_id, status)

    async def get_access_request(self, access_request_id: str) -> AccessRequest:
        access_request = await self.repository.find_by_id(access_request_id)
        if access_request is None:
            logger.warning("Access request not found", extra={"access_request_id": access_request_id})
            raise AccessRequestNotFoundException.for_id(access_request_id)
        return access_request

    async def _pending(self, access_request_id: str) -> AccessRequest:
        access_request = await self.get_access_request(access_request_id)
        if access_request.status != AccessRequestStatus.PENDING:
            logger.warning(
                "Access request is not pending",
                extra={"access_request_id": access_request_id, "status": access_request.status.value},
            )
            raise AccessRequestStatusInvalidException.for_access_request(
                access_request_id,
                access_request.status.value,
            )
        return access_request

    async def approve_access_request(self, access_request_id: str, decision: AccessRequestDecisionRequest) -> None:
        """
        Approve a pending access request and grant its scopes.

        Raises:
            AccessRequestNotFoundException: If no access request has this id
            AccessRequestStatusInvalidException: If the request is not PENDING
            IdmsException: If the scopes cannot be granted
        """
        access_request = await self._pending(access_request_id)
        await self.credentials_service.add_primary_access(access_request)

        now = self.clock()
        approved = set_decision(
            set_status(access_request, AccessRequestStatus.APPROVED),
            AccessRequestDecisionRequest(decided_by=decision.decided_by),
            now,
        )
        await self.repository.update(approved)
        logger.info(
            "Access request approved",
            extra={"access_request_id": access_request_id, "application_id": approved.application_id},
        )

        application = await self.search_service.find_by_id(approved.application_id)
        await notify(self.email.send_access_approved_email_to_team(application, approved), "access approved")
        await self.event_service.approve(approved, decision.decided_by, now)

    async def reject_access_request(self, access_request_id: str, decision: AccessRequestDecisionRequest) -> None:
        """
        Reject a pending access request.

        Raises:
            AccessRequestNotFoundException: If no access request has this id
            AccessRequestStatusInvalidException: If the request is not PENDING
        """
        access_request = await self._pending(access_request_id)

        now = self.clock()
        rejected = set_decision(set_status(access_request, AccessRequestStatus.REJECTED), decision, now)
        await self.repository.update(rejected)
        logger.info(
            "Access request rejected",
            extra={"access_request_id": access_request_id, "application_id": rejected.application_id},
        )

        application = await self.search_service.find_by_id(rejected.application_id, include_deleted=True)
        await notify(self.email.send_access_rejected_email_to_team(application, rejected), "access rejected")
        await self.event_service.reject(rejected, decision.decided_by, now)

    async def cancel_access_request(self, access_request_id: str, cancelled_by: str) -> None:
        """
        Cancel a pending access request.

        Raises:
            AccessRequestNotFoundException: If no access request has this id
            AccessRequestStatusInvalidException: If the request is not PENDING
        """
        access_request = await self._pending(access_request_id)
        now = self.clock()
        cancelled = cancel(access_request, cancelled_by, now)
        await self.repository.update(cancelled)
        await self.event_service.cancel(cancelled, cancelled_by, now)

    async def cancel_access_requests(self, application_id: str, api_id: str | None, cancelled_by: str) -> None:
        """Cancel every pending access request of an application, optionally for one API only."""
        pending = await self.repository.find_requests(application_id, AccessRequestStatus.PENDING)
        now = self.clock()
        for access_request in pending:
            if api_id is not None and access_request.api_id != api_id:
                continue
            cancelled = cancel(access_request, cancelled_by, now)
            await self.repository.update(cancelled)
            await self.event_service.cancel(cancelled, cancelled_by, now)

        logger.info(
            "Pending access requests cancelled",
            extra={"application_id": application_id, "api_id": api_id},
        )
