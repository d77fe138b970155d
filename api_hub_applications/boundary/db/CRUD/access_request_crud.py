"""
Access request CRUD operations.

Dependencies: api_hub_applications.boundary.db.CRUD.base_crud, pymongo
System role: Access request persistence
"""

import logging
from typing import Any, Mapping

from pymongo import ASCENDING, IndexModel

from api_hub_applications.boundary.db.CRUD.base_crud import BaseCRUD, build_and_filter
from api_hub_applications.core.exceptions import AccessRequestNotFoundException
from api_hub_applications.models.access_request import AccessRequest, AccessRequestStatus

logger = logging.getLogger(__name__)


class AccessRequestCRUD(BaseCRUD[AccessRequest]):
    """CRUD operations for access requests."""

    collection_name = "access-requests"

    def to_document(self, access_request: AccessRequest) -> dict[str, Any]:
        document = super().to_document(access_request)
        document["status"] = access_request.status.value
        document["requestedBy"] = self.crypto.encrypt(access_request.requested_by)
        if document.get("decision"):
            document["decision"]["decidedBy"] = self.crypto.encrypt(document["decision"]["decidedBy"])
        if document.get("cancelled"):
            document["cancelled"]["cancelledBy"] = self.crypto.encrypt(document["cancelled"]["cancelledBy"])
        return document

    def from_document(self, document: Mapping[str, Any]) -> AccessRequest:
        data = self._with_id(document)
        data["requestedBy"] = self.crypto.decrypt(data["requestedBy"])
        if data.get("decision"):
            data["decision"] = {**data["decision"], "decidedBy": self.crypto.decrypt(data["decision"]["decidedBy"])}
        if data.get("cancelled"):
            data["cancelled"] = {
                **data["cancelled"],
                "cancelledBy": self.crypto.decrypt(data["cancelled"]["cancelledBy"]),
            }
        return AccessRequest.model_validate(data)

    async def ensure_indexes(self) -> None:
        await self.collection.create_indexes(
            [
                IndexModel([("applicationId", ASCENDING), ("status", ASCENDING)], name="applicationId-status-index"),
                IndexModel([("status", ASCENDING)], name="status-index"),
            ]
        )

    async def insert(self, access_requests: list[AccessRequest]) -> list[AccessRequest]:
        return await self.create_many(access_requests)

    async def find_requests(
        self,
        application_id: str | None = None,
        status: AccessRequestStatus | None = None,
    ) -> list[AccessRequest]:
        query = build_and_filter(
            {"applicationId": application_id} if application_id else None,
            {"status": status.value} if status else None,
        )
        return await self.find(query)

    async def find_by_id(self, access_request_id: str) -> AccessRequest | None:
        return await self.get_by_id(access_request_id)

    async def update(self, access_request: AccessRequest) -> None:
        """
        Persist an access request's current state.

        Raises:
            AccessRequestNotFoundException: If no stored request has this id
        """
        if not await self.replace(access_request):
            logger.warning("Access request not updated", extra={"access_request_id": access_request.id})
            raise AccessRequestNotFoundException.for_id(access_request.id)
