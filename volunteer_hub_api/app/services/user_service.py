"""
Business logic for users.

Users are keyed by email.  The first request carrying an unseen email
creates the user; every later request refreshes the last sign-in time
and only overwrites ``name``/``photoURL`` when the client sends a value.
Uniqueness of the email is maintained by this upsert logic, not by a
store constraint.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends

from volunteer_hub_api.app.core.db import MongoStore, get_store, serialize_document, utc_now
from volunteer_hub_api.app.core.errors import ValidationError
from volunteer_hub_api.app.schemas.user import UserUpsert


logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "google"
DEFAULT_ROLE = "user"


class UserService:
    """Directory of users known to the marketplace."""

    def __init__(self, store: MongoStore) -> None:
        self.store = store

    def upsert(self, identity: UserUpsert) -> Dict[str, Any]:
        """Create the user or refresh an existing one.

        Returns the stored record.  For an existing user the merged
        record carries an extra ``updated`` flag telling whether the
        store modified the document.
        """
        if not identity.email:
            raise ValidationError("Email is required")

        users = self.store.users
        now = utc_now()
        existing = users.find_one({"email": identity.email})
        if existing:
            changes = {
                "lastSignInTime": now,
                "photoURL": identity.photoURL or existing.get("photoURL"),
                "name": identity.name or existing.get("name"),
            }
            result = users.update_one({"email": identity.email}, {"$set": changes})
            logger.info("Refreshed user %s", identity.email)
            merged = serialize_document({**existing, **changes})
            merged["updated"] = result.modified_count > 0
            return merged

        new_user = {
            "name": identity.name,
            "email": identity.email,
            "photoURL": identity.photoURL,
            "provider": identity.provider or DEFAULT_PROVIDER,
            "createdAt": now,
            "lastSignInTime": now,
            "role": DEFAULT_ROLE,
        }
        result = users.insert_one(new_user)
        new_user["_id"] = result.inserted_id
        logger.info("Created user %s", identity.email)
        return serialize_document(new_user)

    def list(self) -> List[Dict[str, Any]]:
        return [serialize_document(user) for user in self.store.users.find()]

    def touch(self, email: Optional[str], last_sign_in_time: Optional[str]) -> Dict[str, int]:
        """Overwrite the last sign-in time of ``email``.

        No existence check is made; an unknown email simply matches no
        document.
        """
        if not email:
            raise ValidationError("Email is required")
        result = self.store.users.update_one(
            {"email": email},
            {"$set": {"lastSignInTime": last_sign_in_time}},
        )
        return {"matchedCount": result.matched_count, "modifiedCount": result.modified_count}


def get_user_service(store: MongoStore = Depends(get_store)) -> UserService:
    return UserService(store)
