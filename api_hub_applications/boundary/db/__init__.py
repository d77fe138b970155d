"""Mongo persistence."""

from api_hub_applications.boundary.db.connection import close_mongo_client, get_database, get_mongo_client

__all__ = ["close_mongo_client", "get_database", "get_mongo_client"]
