"""
Business logic for volunteer opportunity posts.

The ``PostService`` provides CRUD over the ``posts`` collection,
title search, deadline ordering and owner-scoped listings.  Mutating
operations re-check ownership on every call: the caller asserts an
organizer email and it must equal the ``organizerEmail`` stored on the
post.

``volunteersNeeded`` is never written through ``update``; it only
changes through the registration workflow's guarded decrement or the
administrative ``set_volunteers_needed`` overwrite.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from fastapi import Depends
from pymongo import ASCENDING, DESCENDING

from volunteer_hub_api.app.core.db import (
    MongoStore,
    get_store,
    parse_object_id,
    serialize_document,
    utc_now,
)
from volunteer_hub_api.app.core.errors import (
    AuthorizationError,
    NoChangeError,
    NotFoundError,
    ValidationError,
)


logger = logging.getLogger(__name__)

DEFAULT_VOLUNTEERS_NEEDED = 1

# Keys that cannot be written through ``update``.
IMMUTABLE_FIELDS = {"_id", "organizerEmail", "createdAt", "volunteersNeeded"}

_ASCENDING_SORTS = {"asc", "deadline", "true", "1"}
_DESCENDING_SORTS = {"desc", "-deadline", "-1"}


def _sort_direction(sort: Optional[str]) -> Optional[int]:
    if sort is None:
        return None
    value = sort.strip().lower()
    if value in _ASCENDING_SORTS:
        return ASCENDING
    if value in _DESCENDING_SORTS:
        return DESCENDING
    return None


def _check_capacity(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError("volunteersNeeded must be a non-negative integer")
    return value


class PostService:
    """Catalog of volunteer opportunities."""

    def __init__(self, store: MongoStore) -> None:
        self.store = store

    def create(self, post: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a new post and return it with its assigned ``_id``."""
        doc = {key: value for key, value in post.items() if key != "_id"}
        if doc.get("volunteersNeeded") is None:
            doc["volunteersNeeded"] = DEFAULT_VOLUNTEERS_NEEDED
        _check_capacity(doc["volunteersNeeded"])
        doc["createdAt"] = utc_now()

        result = self.store.posts.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info(
            "Post %s '%s' created by %s with %s volunteers needed",
            result.inserted_id,
            doc.get("title"),
            doc.get("organizerEmail"),
            doc["volunteersNeeded"],
        )
        return serialize_document(doc)

    def list(
        self,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Return posts with optional title search, ordering and limit.

        - ``search``: case-insensitive substring of the title.
        - ``sort``: ``asc``/``deadline`` for ascending deadline,
          ``desc`` for descending; anything else keeps store order.
        - ``limit``: maximum number of posts; ``None`` or ``0`` means all.
        """
        query: Dict[str, Any] = {}
        if search:
            query["title"] = {"$regex": re.escape(search), "$options": "i"}
        cursor = self.store.posts.find(query)
        direction = _sort_direction(sort)
        if direction is not None:
            cursor = cursor.sort("deadline", direction)
        if limit:
            cursor = cursor.limit(limit)
        return [serialize_document(post) for post in cursor]

    def teaser(self, limit: int) -> List[Dict[str, Any]]:
        """First ``limit`` posts ordered by approaching deadline."""
        return self.list(sort="asc", limit=limit)

    def get_by_id(self, post_id: str) -> Dict[str, Any]:
        return serialize_document(self._find(post_id))

    def update(self, post_id: str, patch: Dict[str, Any], caller_email: Optional[str]) -> Dict[str, Any]:
        """Apply ``patch`` to a post owned by ``caller_email``.

        Raises ``NoChangeError`` when every supplied field already holds
        the given value; in that case nothing is written.
        """
        post = self._find(post_id)
        self._authorize(post, caller_email)

        changes = {key: value for key, value in patch.items() if key not in IMMUTABLE_FIELDS}
        if not changes or all(post.get(key) == value for key, value in changes.items()):
            raise NoChangeError("No changes were made to the post")

        changes["updatedAt"] = utc_now()
        result = self.store.posts.update_one({"_id": post["_id"]}, {"$set": changes})
        if result.modified_count == 0:
            raise NoChangeError("No changes were made to the post")
        logger.info("Post %s updated by %s: %s", post_id, caller_email, sorted(changes))
        return serialize_document({**post, **changes})

    def delete(self, post_id: str, caller_email: Optional[str] = None) -> Dict[str, Any]:
        post = self._find(post_id)
        if caller_email is not None:
            self._authorize(post, caller_email)
        result = self.store.posts.delete_one({"_id": post["_id"]})
        logger.info("Post %s deleted by %s", post_id, caller_email or "unknown caller")
        return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}

    def list_by_owner(self, email: Optional[str]) -> List[Dict[str, Any]]:
        if not email:
            raise ValidationError("Email is required")
        cursor = self.store.posts.find({"organizerEmail": email}).sort("deadline", ASCENDING)
        return [serialize_document(post) for post in cursor]

    def set_volunteers_needed(self, post_id: str, value: Any) -> Dict[str, int]:
        """Overwrite the remaining capacity of a post.

        Administrative correction only; registrations go through the
        guarded decrement in ``RegistrationService``.
        """
        oid = parse_object_id(post_id)
        _check_capacity(value)
        result = self.store.posts.update_one({"_id": oid}, {"$set": {"volunteersNeeded": value}})
        if result.matched_count == 0:
            raise NotFoundError(f"Post {post_id} not found")
        logger.warning("volunteersNeeded of post %s overwritten to %s", post_id, value)
        return {"matchedCount": result.matched_count, "modifiedCount": result.modified_count}

    def _find(self, post_id: str) -> Dict[str, Any]:
        oid = parse_object_id(post_id)
        post = self.store.posts.find_one({"_id": oid})
        if not post:
            raise NotFoundError(f"Post {post_id} not found")
        return post

    @staticmethod
    def _authorize(post: Dict[str, Any], caller_email: Optional[str]) -> None:
        if not caller_email or caller_email != post.get("organizerEmail"):
            raise AuthorizationError("You are not allowed to modify this post")


def get_post_service(store: MongoStore = Depends(get_store)) -> PostService:
    return PostService(store)
