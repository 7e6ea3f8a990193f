"""
Business logic for volunteer registrations.

Registering a volunteer is the one operation in the service with a
real consistency contract:

* a post's ``volunteersNeeded`` never goes below zero;
* a volunteer (by email) registers at most once per post;
* the counter reported back is the post's state right after this
  registration's decrement.

The workflow validates before it writes, so a rejected registration
leaves no record behind.  The duplicate guard is enforced twice: a
lookup gives a clean rejection in the common case and the unique
``(postId, volunteerEmail)`` index catches concurrent signups that both
pass the lookup.  The decrement is a single conditional ``$inc`` that
only matches while capacity remains; it is never computed from the value
read at the start of the workflow, which is stale under concurrent
callers.

If the decrement fails with a store error after the registration was
inserted, the registration is kept and the error propagates (the caller
sees a server error).  There is no compensating transaction for that
case.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from volunteer_hub_api.app.core.db import (
    MongoStore,
    get_store,
    parse_object_id,
    serialize_document,
    utc_now,
)
from volunteer_hub_api.app.core.errors import (
    AuthorizationError,
    CapacityExhaustedError,
    DuplicateRegistrationError,
    InvalidIdError,
    NotFoundError,
    ValidationError,
)


logger = logging.getLogger(__name__)

# Keys managed by the workflow; client extras cannot override them.
RESERVED_FIELDS = {"_id", "postId", "volunteerId", "volunteerName", "volunteerEmail", "registeredAt"}


class RegistrationService:
    """Service for signing volunteers up to posts."""

    def __init__(self, store: MongoStore) -> None:
        self.store = store

    def register(
        self,
        post_id: Optional[str],
        user_id: Optional[str],
        user_name: Optional[str],
        user_email: Optional[str],
        extra: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Register ``user_email`` for the post and take one open slot.

        Returns ``{"insertedId": ..., "newVolunteersNeeded": ...}``.

        Raises
        ------
        InvalidIdError
            ``post_id`` is not a well-formed id.
        ValidationError
            ``user_email`` is missing.
        NotFoundError
            No post has that id.
        CapacityExhaustedError
            The post has no open slots left.
        DuplicateRegistrationError
            The volunteer is already registered for the post.
        """
        oid = parse_object_id(post_id)
        if not user_email:
            raise ValidationError("Volunteer email is required")

        post = self._load_post(oid)
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")
        if not _has_open_slots(post):
            raise CapacityExhaustedError("No more volunteers are needed for this post")
        if self.has_registered(str(oid), user_email):
            raise DuplicateRegistrationError("You have already registered for this post")

        registration = {key: value for key, value in (extra or {}).items() if key not in RESERVED_FIELDS}
        registration.update(
            {
                "postId": str(oid),
                "volunteerId": user_id,
                "volunteerName": user_name,
                "volunteerEmail": user_email,
                "registeredAt": utc_now(),
            }
        )
        try:
            inserted_id = self.store.volunteer_requests.insert_one(registration).inserted_id
        except DuplicateKeyError as exc:
            raise DuplicateRegistrationError("You have already registered for this post") from exc

        try:
            updated = self.store.posts.find_one_and_update(
                {"_id": oid, "volunteersNeeded": {"$gt": 0}},
                {"$inc": {"volunteersNeeded": -1}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError:
            logger.error(
                "Registration %s for post %s stored but capacity decrement failed",
                inserted_id,
                oid,
            )
            raise

        if updated is None:
            # The post was deleted or its last slot was taken after the load.
            self.store.volunteer_requests.delete_one({"_id": inserted_id})
            if self.store.posts.find_one({"_id": oid}, projection={"_id": 1}) is None:
                logger.info("Post %s was deleted while registering %s", oid, user_email)
                raise NotFoundError(f"Post {post_id} not found")
            logger.info("Post %s filled up while registering %s", oid, user_email)
            raise CapacityExhaustedError("No more volunteers are needed for this post")

        logger.info(
            "Volunteer %s registered for post %s, %s slots left",
            user_email,
            oid,
            updated["volunteersNeeded"],
        )
        return {"insertedId": str(inserted_id), "newVolunteersNeeded": updated["volunteersNeeded"]}

    def has_registered(self, post_id: Optional[str], user_email: Optional[str]) -> bool:
        if not post_id or not user_email:
            return False
        # Registrations store the canonical lowercase form of the post id.
        try:
            post_id = str(parse_object_id(post_id))
        except InvalidIdError:
            return False
        existing = self.store.volunteer_requests.find_one(
            {"postId": post_id, "volunteerEmail": user_email},
            projection={"_id": 1},
        )
        return existing is not None

    def list_by_volunteer(self, email: Optional[str]) -> List[Dict[str, Any]]:
        if not email:
            raise ValidationError("Email is required")
        cursor = self.store.volunteer_requests.find({"volunteerEmail": email}).sort("registeredAt", DESCENDING)
        return [serialize_document(doc) for doc in cursor]

    def delete(self, registration_id: str, caller_email: Optional[str]) -> Dict[str, Any]:
        """Withdraw a registration owned by ``caller_email``.

        The post's capacity is not restored.
        """
        oid = parse_object_id(registration_id)
        if not caller_email:
            raise ValidationError("Email is required")
        registration = self.store.volunteer_requests.find_one({"_id": oid})
        if not registration:
            raise NotFoundError(f"Volunteer request {registration_id} not found")
        if registration.get("volunteerEmail") != caller_email:
            raise AuthorizationError("You are not allowed to delete this volunteer request")
        result = self.store.volunteer_requests.delete_one({"_id": oid})
        logger.info("Volunteer request %s withdrawn by %s", registration_id, caller_email)
        return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}

    def _load_post(self, oid) -> Optional[Dict[str, Any]]:
        return self.store.posts.find_one({"_id": oid})


def _has_open_slots(post: Dict[str, Any]) -> bool:
    """Whether the stored counter is a positive integer.

    Documents written by other clients may hold a string or a missing
    counter; those never match the conditional decrement either, so they
    count as full.
    """
    capacity = post.get("volunteersNeeded")
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        return False
    return capacity > 0


def get_registration_service(store: MongoStore = Depends(get_store)) -> RegistrationService:
    return RegistrationService(store)
