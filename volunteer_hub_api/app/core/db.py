"""
MongoDB integration.

This module provides the ``MongoStore`` handle that owns the client
connection and exposes the three collections used by the service
(``users``, ``posts`` and ``volunteer_requests``), a FastAPI dependency
returning the handle from application state (``get_store``), and small
helpers for converting between document ids and their wire form.

The handle is created once per process by the application's startup
hook and closed on shutdown.  Tests construct it directly around a
``mongomock`` client.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from fastapi import Request
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.server_api import ServerApi

from .config import Settings
from .errors import InvalidIdError


logger = logging.getLogger(__name__)

USERS = "users"
POSTS = "posts"
VOLUNTEER_REQUESTS = "volunteer_requests"


class MongoStore:
    """Explicitly owned handle on the document store."""

    def __init__(self, client: MongoClient, database_name: str) -> None:
        self.client = client
        self.database: Database = client[database_name]

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoStore":
        client = MongoClient(
            settings.mongodb_url,
            server_api=ServerApi("1", strict=True, deprecation_errors=True),
            serverSelectionTimeoutMS=settings.mongo_timeout_ms,
        )
        return cls(client, settings.database_name)

    @property
    def users(self) -> Collection:
        return self.database[USERS]

    @property
    def posts(self) -> Collection:
        return self.database[POSTS]

    @property
    def volunteer_requests(self) -> Collection:
        return self.database[VOLUNTEER_REQUESTS]

    def ping(self) -> None:
        """Confirm the deployment is reachable."""
        self.client.admin.command("ping")
        logger.info("Pinged your deployment. You successfully connected to MongoDB!")

    def ensure_indexes(self) -> None:
        """Create the indexes the services rely on.

        The compound unique index on registrations is what makes a
        registration insert the atomicity boundary for duplicate signups.
        """
        self.volunteer_requests.create_index(
            [("postId", ASCENDING), ("volunteerEmail", ASCENDING)],
            unique=True,
            name="unique_post_volunteer",
        )
        self.volunteer_requests.create_index([("volunteerEmail", ASCENDING)])
        self.posts.create_index([("organizerEmail", ASCENDING), ("deadline", ASCENDING)])
        self.posts.create_index([("deadline", ASCENDING)])
        self.users.create_index([("email", ASCENDING)])

    def close(self) -> None:
        self.client.close()


def get_store(request: Request) -> MongoStore:
    """FastAPI dependency returning the store owned by the application."""
    return request.app.state.store


def parse_object_id(value: Any) -> ObjectId:
    """Return ``value`` as an ``ObjectId`` or raise ``InvalidIdError``."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidIdError(value)
    return ObjectId(value)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def serialize_document(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Copy ``doc`` with ObjectId values turned into strings."""
    if doc is None:
        return None
    result = dict(doc)
    for key, value in list(result.items()):
        if isinstance(value, ObjectId):
            result[key] = str(value)
        elif isinstance(value, datetime):
            result[key] = value.isoformat()
    return result
