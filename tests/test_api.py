from __future__ import annotations

from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from volunteer_hub_api.app.core.db import MongoStore
from volunteer_hub_api.app.main import create_app


ORGANIZER = "organizer@example.com"


def _create_post(client: TestClient, **fields) -> dict:
    payload = {
        "title": "Beach clean-up",
        "deadline": "2025-09-01",
        "organizerEmail": ORGANIZER,
        "organizerName": "Olive Organizer",
        "category": "Environment",
    }
    payload.update(fields)
    response = client.post("/posts", json=payload)
    assert response.status_code == 201
    return response.json()


def test_liveness(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Volunteer server is running"


def test_user_upsert_flow(client: TestClient) -> None:
    created = client.post("/users", json={"email": "a@x.com", "name": "A"})
    assert created.status_code == 200
    assert created.json()["role"] == "user"

    refreshed = client.post("/users", json={"email": "a@x.com"})
    assert refreshed.status_code == 200
    assert refreshed.json()["name"] == "A"
    assert "updated" in refreshed.json()

    listed = client.get("/users")
    assert [user["email"] for user in listed.json()] == ["a@x.com"]

    touched = client.patch("/users", json={"email": "a@x.com", "lastSignInTime": "2030-01-01T00:00:00Z"})
    assert touched.json() == {"matchedCount": 1, "modifiedCount": 1}


def test_user_upsert_without_email(client: TestClient) -> None:
    response = client.post("/users", json={"name": "Nobody"})
    assert response.status_code == 400
    assert response.json() == {"error": "Email is required"}


def test_post_crud(client: TestClient) -> None:
    created = _create_post(client)
    assert created["volunteersNeeded"] == 1

    fetched = client.get(f"/posts/{created['_id']}")
    assert fetched.status_code == 200
    assert fetched.json() == created
    assert client.get(f"/api/posts/{created['_id']}").json() == created

    updated = client.put(
        f"/posts/{created['_id']}",
        json={"organizerEmail": ORGANIZER, "title": "Harbour clean-up"},
    )
    assert updated.status_code == 200
    assert updated.json()["title"] == "Harbour clean-up"

    deleted = client.delete(f"/posts/{created['_id']}", params={"email": ORGANIZER})
    assert deleted.json() == {"acknowledged": True, "deletedCount": 1}
    assert client.get(f"/posts/{created['_id']}").status_code == 404


def test_create_post_under_api_prefix(client: TestClient) -> None:
    response = client.post("/api/posts", json={"title": "Food bank", "volunteersNeeded": 4, "organizerEmail": ORGANIZER})
    assert response.status_code == 201
    assert response.json()["volunteersNeeded"] == 4


def test_get_post_errors(client: TestClient) -> None:
    assert client.get("/posts/not-an-id").status_code == 400
    assert client.get(f"/posts/{ObjectId()}").status_code == 404


def test_update_rejections(client: TestClient, store: MongoStore) -> None:
    created = _create_post(client)
    before = store.posts.find_one({"_id": ObjectId(created["_id"])})

    forbidden = client.put(
        f"/posts/{created['_id']}",
        json={"organizerEmail": "intruder@example.com", "title": "Hijacked"},
    )
    assert forbidden.status_code == 403
    assert store.posts.find_one({"_id": ObjectId(created["_id"])}) == before

    unchanged = client.put(
        f"/posts/{created['_id']}",
        json={"organizerEmail": ORGANIZER, "title": created["title"]},
    )
    assert unchanged.status_code == 400

    assert client.delete(f"/posts/{created['_id']}", params={"email": "intruder@example.com"}).status_code == 403


def test_listings(client: TestClient) -> None:
    for month in range(1, 9):
        _create_post(client, title=f"Task {month}", deadline=f"2025-{month:02d}-01")
    _create_post(client, title="Garden work", deadline="2024-12-01", organizerEmail="other@example.com")

    teaser = client.get("/api/posts").json()
    assert len(teaser) == 6
    assert teaser[0]["title"] == "Garden work"

    everything = client.get("/api/posts/all").json()
    assert len(everything) == 9
    deadlines = [post["deadline"] for post in everything]
    assert deadlines == sorted(deadlines)

    found = client.get("/api/posts/all", params={"search": "GARDEN"}).json()
    assert [post["title"] for post in found] == ["Garden work"]

    limited = client.get("/posts", params={"sort": "asc", "limit": 2}).json()
    assert [post["title"] for post in limited] == ["Garden work", "Task 1"]

    mine = client.get("/my-posts", params={"email": ORGANIZER}).json()
    assert len(mine) == 8
    assert client.get("/my-posts").status_code == 400


def test_volunteer_scenario(client: TestClient) -> None:
    post = _create_post(client, volunteersNeeded=2)

    def register(email: str):
        return client.post(
            "/api/volunteers",
            json={"postId": post["_id"], "userId": email, "userName": email, "userEmail": email},
        )

    first = register("x@example.com")
    assert first.status_code == 201
    assert first.json()["newVolunteersNeeded"] == 1

    second = register("y@example.com")
    assert second.json()["newVolunteersNeeded"] == 0

    third = register("z@example.com")
    assert third.status_code == 400
    assert "error" in third.json()

    assert client.get(f"/posts/{post['_id']}").json()["volunteersNeeded"] == 0


def test_duplicate_signup_via_legacy_route(client: TestClient) -> None:
    post = _create_post(client, volunteersNeeded=5)
    body = {"postId": post["_id"], "userName": "X", "userEmail": "x@example.com", "postTitle": post["title"]}

    assert client.post("/volunteer-requests", json=body).status_code == 201
    duplicate = client.post("/api/volunteers", json=body)
    assert duplicate.status_code == 400
    assert duplicate.json() == {"error": "You have already registered for this post"}

    registered = client.get("/api/volunteers", params={"postId": post["_id"], "email": "x@example.com"})
    assert registered.json() == {"registered": True}
    other = client.get("/api/volunteers", params={"postId": post["_id"], "email": "y@example.com"})
    assert other.json() == {"registered": False}


def test_registration_lookup_with_uppercase_post_id(client: TestClient) -> None:
    post = _create_post(client, volunteersNeeded=2)
    upper = post["_id"].upper()

    created = client.post("/api/volunteers", json={"postId": upper, "userEmail": "x@example.com"})
    assert created.status_code == 201

    registered = client.get("/api/volunteers", params={"postId": upper, "email": "x@example.com"})
    assert registered.json() == {"registered": True}


def test_register_on_post_with_text_capacity(client: TestClient, store: MongoStore) -> None:
    post_id = store.posts.insert_one({"title": "Legacy post", "volunteersNeeded": "3"}).inserted_id

    response = client.post("/api/volunteers", json={"postId": str(post_id), "userEmail": "x@example.com"})

    assert response.status_code == 400
    assert response.json() == {"error": "No more volunteers are needed for this post"}
    assert store.volunteer_requests.count_documents({}) == 0


def test_register_errors(client: TestClient) -> None:
    assert client.post("/api/volunteers", json={"postId": "bad", "userEmail": "x@example.com"}).status_code == 400
    assert client.post("/api/volunteers", json={"postId": str(ObjectId()), "userEmail": "x@example.com"}).status_code == 404


def test_my_volunteer_requests_and_withdrawal(client: TestClient) -> None:
    post = _create_post(client, volunteersNeeded=3)
    created = client.post(
        "/volunteer-requests",
        json={"postId": post["_id"], "userName": "X", "userEmail": "x@example.com", "postTitle": post["title"]},
    ).json()

    mine = client.get("/my-volunteer-requests", params={"email": "x@example.com"}).json()
    assert [item["_id"] for item in mine] == [created["insertedId"]]
    assert mine[0]["postTitle"] == post["title"]

    url = f"/volunteer-requests/{created['insertedId']}"
    assert client.delete(url, params={"email": "y@example.com"}).status_code == 403
    assert client.delete(url).status_code == 400
    assert client.delete(url, params={"email": "x@example.com"}).json()["deletedCount"] == 1
    assert client.get("/my-volunteer-requests", params={"email": "x@example.com"}).json() == []


def test_admin_capacity_overwrite(client: TestClient) -> None:
    post = _create_post(client, volunteersNeeded=0)

    response = client.patch(f"/posts/{post['_id']}/volunteer", json={"volunteersNeeded": 3})

    assert response.status_code == 200
    assert client.get(f"/posts/{post['_id']}").json()["volunteersNeeded"] == 3
    assert client.patch(f"/posts/{post['_id']}/volunteer", json={"volunteersNeeded": -1}).status_code == 400


def test_store_failure_returns_generic_500(store: MongoStore, monkeypatch) -> None:
    app = create_app(store=store)

    def unavailable(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("cluster0 unreachable: secret details")

    with TestClient(app) as client:
        monkeypatch.setattr(MongoStore, "users", property(lambda self: type("Users", (), {"find": unavailable})()))
        response = client.get("/users")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_malformed_body_is_bad_request(client: TestClient) -> None:
    post = _create_post(client)

    response = client.patch(f"/posts/{post['_id']}/volunteer", json={"volunteersNeeded": "many"})

    assert response.status_code == 400
    assert "volunteersNeeded" in response.json()["error"]


def test_custom_identity_verifier_is_used(store: MongoStore) -> None:
    class UppercaseRejectingVerifier:
        def verify(self, claimed_email):
            if claimed_email and claimed_email.islower():
                return claimed_email
            return None

    app = create_app(store=store, identity_verifier=UppercaseRejectingVerifier())
    with TestClient(app) as client:
        post = _create_post(client)
        response = client.put(f"/posts/{post['_id']}", json={"organizerEmail": ORGANIZER.upper(), "title": "x"})

    assert response.status_code == 403
