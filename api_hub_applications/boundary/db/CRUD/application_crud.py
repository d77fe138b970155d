"""
Application CRUD operations.

Stores applications in the "applications" collection with team member
emails, the creator, the deleting user and client secrets encrypted.

Dependencies: api_hub_applications.boundary.db.CRUD.base_crud, pymongo
System role: Application persistence
"""

import logging
from typing import Any, Mapping

from pymongo import ASCENDING, IndexModel

from api_hub_applications.boundary.db.CRUD.base_crud import BaseCRUD, build_and_filter
from api_hub_applications.core.exceptions import ApplicationNotFoundException, NotUpdatedException
from api_hub_applications.models.application import Application
from api_hub_applications.models.application_lenses import is_hidden

logger = logging.getLogger(__name__)

NOT_DELETED = {"deleted": None}


class ApplicationCRUD(BaseCRUD[Application]):
    """CRUD operations for applications."""

    collection_name = "applications"

    def to_document(self, application: Application) -> dict[str, Any]:
        document = super().to_document(application)
        document["createdBy"]["email"] = self.crypto.encrypt(application.created_by.email)
        document["teamMembers"] = [
            {"email": self.crypto.encrypt(member.email)} for member in application.team_members
        ]
        for credential, stored_credential in zip(application.credentials, document["credentials"]):
            # Hidden credentials never keep a secret
            stored_credential["clientSecret"] = (
                None if is_hidden(credential) else self.crypto.encrypt_optional(credential.client_secret)
            )
        if document.get("deleted"):
            document["deleted"]["deletedBy"] = self.crypto.encrypt(document["deleted"]["deletedBy"])
        # Team name is resolved from the owning team when read
        document.pop("teamName", None)
        document.pop("issues", None)
        return document

    def from_document(self, document: Mapping[str, Any]) -> Application:
        data = self._with_id(document)
        data["createdBy"] = {"email": self.crypto.decrypt(data["createdBy"]["email"])}
        data["teamMembers"] = [
            {"email": self.crypto.decrypt(member["email"])} for member in data.get("teamMembers", [])
        ]
        data["credentials"] = [
            {**credential, "clientSecret": self.crypto.decrypt_optional(credential.get("clientSecret"))}
            for credential in data.get("credentials", [])
        ]
        if data.get("deleted"):
            data["deleted"] = {**data["deleted"], "deletedBy": self.crypto.decrypt(data["deleted"]["deletedBy"])}
        return Application.model_validate(data)

    async def ensure_indexes(self) -> None:
        await self.collection.create_indexes(
            [
                IndexModel([("teamMembers.email", ASCENDING)], name="teamMembers-email-index"),
                IndexModel([("teamId", ASCENDING)], name="teamId-index"),
                IndexModel([("apis.id", ASCENDING)], name="apis-id-index"),
            ]
        )

    async def find_all(self, team_member: str | None = None, include_deleted: bool = False) -> list[Application]:
        """
        Find applications, optionally only those with a given team member.

        Args:
            team_member: Email of a member listed directly on the application
            include_deleted: Include soft-deleted applications
        """
        query = build_and_filter(
            {"teamMembers.email": self.crypto.encrypt(team_member)} if team_member else None,
            None if include_deleted else NOT_DELETED,
        )
        return await self.find(query)

    async def find_all_using_api(self, api_id: str, include_deleted: bool = False) -> list[Application]:
        query = build_and_filter({"apis.id": api_id}, None if include_deleted else NOT_DELETED)
        return await self.find(query)

    async def find_by_team_ids(self, team_ids: list[str], include_deleted: bool = False) -> list[Application]:
        if not team_ids:
            return []
        query = build_and_filter({"teamId": {"$in": team_ids}}, None if include_deleted else NOT_DELETED)
        return await self.find(query)

    async def find_by_id(self, application_id: str, include_deleted: bool = False) -> Application:
        """
        Get an application by id.

        Raises:
            ApplicationNotFoundException: If missing, malformed, or soft-deleted and not requested
        """
        application = await self.get_by_id(application_id)
        if application is None or (application.deleted is not None and not include_deleted):
            logger.warning("Application not found", extra={"application_id": application_id})
            raise ApplicationNotFoundException.for_id(application_id)
        return application

    async def insert(self, application: Application) -> Application:
        created = await self.create(application)
        logger.info("Application inserted", extra={"application_id": created.id})
        return created

    async def update(self, application: Application) -> None:
        """
        Persist an application's current state.

        Raises:
            NotUpdatedException: If no stored application has this id
        """
        if not await self.replace(application):
            logger.warning("Application not updated", extra={"application_id": application.id})
            raise NotUpdatedException.for_id(application.id)

    async def delete(self, application_id: str) -> None:
        """Hard delete, used when registration has to be rolled back."""
        if not await self.delete_by_id(application_id):
            raise ApplicationNotFoundException.for_id(application_id)
