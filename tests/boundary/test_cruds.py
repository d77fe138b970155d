"""
Test suite for the Mongo CRUD classes.

Collections are mocked; the tests cover the stored document shape
(including encrypted fields), queries and not-found handling.

System role: Verification of repository behaviour
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from api_hub_applications.boundary.db.CRUD.access_request_crud import AccessRequestCRUD
from api_hub_applications.boundary.db.CRUD.application_crud import ApplicationCRUD
from api_hub_applications.boundary.db.CRUD.base_crud import build_and_filter, string_to_object_id
from api_hub_applications.boundary.db.CRUD.event_crud import EventCRUD
from api_hub_applications.boundary.db.CRUD.team_crud import TeamCRUD
from api_hub_applications.core.crypto import SensitiveCrypto
from api_hub_applications.core.exceptions import (
    ApplicationNotFoundException,
    EventNotFoundException,
    NotUpdatedException,
    TeamNameNotUniqueException,
)
from api_hub_applications.models.access_request import AccessRequest, AccessRequestStatus
from api_hub_applications.models.application import Application, Deleted
from api_hub_applications.models.event import EntityType, Event, EventType
from api_hub_applications.models.team import Team


@pytest.fixture
def collection() -> MagicMock:
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.insert_many = AsyncMock()
    collection.find_one = AsyncMock()
    collection.replace_one = AsyncMock()
    collection.delete_one = AsyncMock()
    collection.create_indexes = AsyncMock()
    return collection


def stored(document: dict, object_id: str) -> dict:
    """A document as Mongo would return it."""
    return {"_id": ObjectId(object_id), **document}


def given_found(collection: MagicMock, documents: list[dict]) -> None:
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=documents)
    collection.find.return_value = cursor


class TestBaseHelpers:
    def test_string_to_object_id_rejects_malformed_ids(self) -> None:
        assert string_to_object_id("not-an-id") is None
        assert string_to_object_id(None) is None
        assert string_to_object_id("65f2c0ffee0000000000bbbb") == ObjectId("65f2c0ffee0000000000bbbb")

    def test_build_and_filter(self) -> None:
        assert build_and_filter(None, None) == {}
        assert build_and_filter({"a": 1}, None) == {"a": 1}
        assert build_and_filter({"a": 1}, {"b": 2}) == {"$and": [{"a": 1}, {"b": 2}]}


class TestApplicationCRUD:
    """Test suite for ApplicationCRUD."""

    def test_document_should_encrypt_emails_and_secrets(
        self,
        collection: MagicMock,
        crypto: SensitiveCrypto,
        application: Application,
    ) -> None:
        # Act
        document = ApplicationCRUD(collection, crypto).to_document(application)

        # Assert
        assert "id" not in document
        assert document["createdBy"]["email"] == crypto.encrypt("creator@example.com")
        assert document["teamMembers"] == [{"email": crypto.encrypt("creator@example.com")}]
        secrets = [credential["clientSecret"] for credential in document["credentials"]]
        assert secrets == [None, crypto.encrypt("test-secret-1234")]
        assert "teamName" not in document

    def test_document_should_drop_secret_of_hidden_credential(
        self,
        collection: MagicMock,
        crypto: SensitiveCrypto,
        application: Application,
    ) -> None:
        # Arrange
        hidden = application.credentials[0].model_copy(update={"client_secret": "should-not-be-stored"})
        leaking = application.model_copy(update={"credentials": [hidden, application.credentials[1]]})

        # Act
        document = ApplicationCRUD(collection, crypto).to_document(leaking)

        # Assert
        assert document["credentials"][0]["clientSecret"] is None
        assert document["credentials"][1]["clientSecret"] == crypto.encrypt("test-secret-1234")

    def test_document_round_trip_should_restore_application(
        self,
        collection: MagicMock,
        crypto: SensitiveCrypto,
        application: Application,
        now,
    ) -> None:
        crud = ApplicationCRUD(collection, crypto)
        deleted = application.model_copy(update={"deleted": Deleted(deleted=now, deleted_by="deleter@example.com")})

        restored = crud.from_document(stored(crud.to_document(deleted), deleted.id))

        assert restored == deleted

    @pytest.mark.asyncio
    async def test_insert_should_return_generated_id(
        self,
        collection: MagicMock,
        crypto: SensitiveCrypto,
        application: Application,
    ) -> None:
        collection.insert_one.return_value = MagicMock(inserted_id=ObjectId("65f2c0ffee0000000000dddd"))

        created = await ApplicationCRUD(collection, crypto).insert(application.model_copy(update={"id": None}))

        assert created.id == "65f2c0ffee0000000000dddd"

    @pytest.mark.asyncio
    async def test_find_by_id_should_hide_soft_deleted(
        self,
        collection: MagicMock,
        crypto: SensitiveCrypto,
        application: Application,
        now,
    ) -> None:
        # Arrange
        crud = ApplicationCRUD(collection, crypto)
        deleted = application.model_copy(update={"deleted": Deleted(deleted=now, deleted_by="deleter@example.com")})
        collection.find_one.return_value = stored(crud.to_document(deleted), deleted.id)

        # Act / Assert
        with pytest.raises(ApplicationNotFoundException):
            await crud.find_by_id(application.id)
        assert (await crud.find_by_id(application.id, include_deleted=True)).deleted is not None

    @pytest.mark.asyncio
    async def test_find_by_id_malformed_id_should_raise_not_found(
        self,
        collection: MagicMock,
        crypto: SensitiveCrypto,
    ) -> None:
        with pytest.raises(ApplicationNotFoundException):
            await ApplicationCRUD(collection, crypto).find_by_id("not-an-id")

        collection.find_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_find_all_should_query_encrypted_team_member(
        self,
        collection: MagicMock,
        crypto: SensitiveCrypto,
    ) -> None:
        given_found(collection, [])

        await ApplicationCRUD(collection, crypto).find_all("creator@example.com")

        query = collection.find.call_args.args[0]
        assert query == {"$and": [{"teamMembers.email": crypto.encrypt("creator@example.com")}, {"deleted": None}]}

    @pytest.mark.asyncio
    async def test_update_unmatched_should_raise(
        self,
        collection: MagicMock,
        crypto: SensitiveCrypto,
        application: Application,
    ) -> None:
        collection.replace_one.return_value = MagicMock(matched_count=0)

        with pytest.raises(NotUpdatedException):
            await ApplicationCRUD(collection, crypto).update(application)


class TestTeamCRUD:
    """Test suite for TeamCRUD."""

    @pytest.mark.asyncio
    async def test_insert_duplicate_name_should_raise(
        self,
        collection: MagicMock,
        crypto: SensitiveCrypto,
        team: Team,
    ) -> None:
        collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")

        with pytest.raises(TeamNameNotUniqueException):
            await TeamCRUD(collection, crypto).insert(team)

    @pytest.mark.asyncio
    async def test_update_duplicate_name_should_raise(
        self,
        collection: MagicMock,
        crypto: SensitiveCrypto,
        team: Team,
    ) -> None:
        collection.replace_one.side_effect = DuplicateKeyError("E11000 duplicate key")

        with pytest.raises(TeamNameNotUniqueException):
            await TeamCRUD(collection, crypto).update(team)

    @pytest.mark.asyncio
    async def test_find_by_name_should_decrypt_members(
        self,
        collection: MagicMock,
        crypto: SensitiveCrypto,
        team: Team,
    ) -> None:
        crud = TeamCRUD(collection, crypto)
        collection.find_one.return_value = stored(crud.to_document(team), team.id)

        found = await crud.find_by_name("team rocket")

        assert found == team
        assert collection.find_one.call_args.args[0] == {"name": "team rocket"}

    @pytest.mark.asyncio
    async def test_find_by_name_missing_should_return_none(self, collection: MagicMock, crypto: SensitiveCrypto) -> None:
        collection.find_one.return_value = None

        assert await TeamCRUD(collection, crypto).find_by_name("Team Magma") is None


class TestAccessRequestCRUD:
    """Test suite for AccessRequestCRUD."""

    def test_document_should_encrypt_requester(
        self,
        collection: MagicMock,
        crypto: SensitiveCrypto,
        access_request: AccessRequest,
    ) -> None:
        crud = AccessRequestCRUD(collection, crypto)

        document = crud.to_document(access_request)

        assert document["status"] == "PENDING"
        assert document["requestedBy"] == crypto.encrypt("requester@example.com")
        assert crud.from_document(stored(document, access_request.id)) == access_request

    @pytest.mark.asyncio
    async def test_find_requests_should_filter_on_application_and_status(
        self,
        collection: MagicMock,
        crypto: SensitiveCrypto,
    ) -> None:
        given_found(collection, [])

        await AccessRequestCRUD(collection, crypto).find_requests("app-1", AccessRequestStatus.APPROVED)

        assert collection.find.call_args.args[0] == {"$and": [{"applicationId": "app-1"}, {"status": "APPROVED"}]}


class TestEventCRUD:
    """Test suite for EventCRUD."""

    @pytest.fixture
    def event(self, now) -> Event:
        return Event(
            id="65f2c0ffee0000000000eeee",
            entity_id="app-1",
            entity_type=EntityType.APPLICATION,
            event_type=EventType.CREATED,
            user="creator@example.com",
            timestamp=now,
            description="My Application",
            parameters={"applicationName": "My Application"},
        )

    def test_document_should_encrypt_user_text_and_parameters(
        self,
        collection: MagicMock,
        crypto: SensitiveCrypto,
        event: Event,
    ) -> None:
        crud = EventCRUD(collection, crypto)

        document = crud.to_document(event)

        assert document["user"] == crypto.encrypt("creator@example.com")
        assert document["parameters"] == crypto.encrypt('{"applicationName": "My Application"}')
        assert document["entityType"] == "APPLICATION"
        assert crud.from_document(stored(document, event.id)) == event

    @pytest.mark.asyncio
    async def test_find_by_user_should_query_encrypted_user(self, collection: MagicMock, crypto: SensitiveCrypto) -> None:
        given_found(collection, [])

        await EventCRUD(collection, crypto).find_by_user("creator@example.com")

        assert collection.find.call_args.args[0] == {"user": crypto.encrypt("creator@example.com")}

    @pytest.mark.asyncio
    async def test_find_by_id_missing_should_raise(self, collection: MagicMock, crypto: SensitiveCrypto) -> None:
        collection.find_one.return_value = None

        with pytest.raises(EventNotFoundException):
            await EventCRUD(collection, crypto).find_by_id("65f2c0ffee0000000000eeee")
