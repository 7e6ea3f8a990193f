from __future__ import annotations

import mongomock
import pytest
from fastapi.testclient import TestClient

from volunteer_hub_api.app.core.db import MongoStore
from volunteer_hub_api.app.main import create_app
from volunteer_hub_api.app.services.post_service import PostService
from volunteer_hub_api.app.services.registration_service import RegistrationService
from volunteer_hub_api.app.services.user_service import UserService


ORGANIZER = "organizer@example.com"


@pytest.fixture()
def store() -> MongoStore:
    store = MongoStore(mongomock.MongoClient(), "Volunteer_Hub_test")
    store.ensure_indexes()
    return store


@pytest.fixture()
def users(store: MongoStore) -> UserService:
    return UserService(store)


@pytest.fixture()
def posts(store: MongoStore) -> PostService:
    return PostService(store)


@pytest.fixture()
def registrations(store: MongoStore) -> RegistrationService:
    return RegistrationService(store)


@pytest.fixture()
def make_post(posts: PostService):
    def _make_post(**fields):
        payload = {
            "title": "Beach clean-up",
            "deadline": "2025-09-01",
            "organizerEmail": ORGANIZER,
            "organizerName": "Olive Organizer",
        }
        payload.update(fields)
        return posts.create(payload)

    return _make_post


@pytest.fixture()
def client(store: MongoStore):
    app = create_app(store=store)
    with TestClient(app) as test_client:
        yield test_client
