"""Mongo CRUD repositories."""

from api_hub_applications.boundary.db.CRUD.access_request_crud import AccessRequestCRUD
from api_hub_applications.boundary.db.CRUD.application_crud import ApplicationCRUD
from api_hub_applications.boundary.db.CRUD.base_crud import BaseCRUD
from api_hub_applications.boundary.db.CRUD.event_crud import EventCRUD
from api_hub_applications.boundary.db.CRUD.team_crud import TeamCRUD

__all__ = ["AccessRequestCRUD", "ApplicationCRUD", "BaseCRUD", "EventCRUD", "TeamCRUD"]
