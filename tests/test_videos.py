import uuid
from unittest.mock import patch

from fastapi.testclient import TestClient

from tubely.main import app


def test_create_and_get_video(client, owner, owner_headers):
    res = client.post("/api/videos", json={"title": "Boots", "description": "Review"}, headers=owner_headers)
    assert res.status_code == 201
    created = res.json()
    assert created["user_id"] == owner.id
    assert created["thumbnail_url"] is None
    assert created["video_url"] is None

    res = client.get(f"/api/videos/{created['id']}", headers=owner_headers)
    assert res.status_code == 200
    assert res.json()["title"] == "Boots"


def test_create_video_requires_title(client, owner_headers):
    res = client.post("/api/videos", json={"title": "  "}, headers=owner_headers)
    assert res.status_code == 400


def test_list_only_returns_own_videos(client, db, video, stranger, owner_headers, stranger_headers):
    client.post("/api/videos", json={"title": "Not yours"}, headers=stranger_headers)
    res = client.get("/api/videos", headers=owner_headers)
    assert res.status_code == 200
    assert [v["id"] for v in res.json()] == [video.id]


def test_get_other_users_video_is_forbidden(client, video, stranger_headers):
    res = client.get(f"/api/videos/{video.id}", headers=stranger_headers)
    assert res.status_code == 403
    assert res.json()["kind"] == "Forbidden"


def test_unknown_video(client, owner_headers):
    res = client.get(f"/api/videos/{uuid.uuid4()}", headers=owner_headers)
    assert res.status_code == 500
    assert res.json() == {"error": "Couldn't get video", "kind": "NotFound"}


def test_malformed_video_id(client, owner_headers):
    res = client.get("/api/videos/not-a-uuid", headers=owner_headers)
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid ID", "kind": "BadRequest"}


def test_delete_video(client, video, owner_headers, stranger_headers):
    assert client.delete(f"/api/videos/{video.id}", headers=stranger_headers).status_code == 403
    assert client.delete(f"/api/videos/{video.id}", headers=owner_headers).status_code == 204
    assert client.get(f"/api/videos/{video.id}", headers=owner_headers).json()["kind"] == "NotFound"


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_unexpected_error_has_error_payload(db, owner_headers):
    with patch("tubely.routers.videos.list_videos_for_user", side_effect=RuntimeError("db driver exploded")):
        with TestClient(app, raise_server_exceptions=False) as c:
            res = c.get("/api/videos", headers=owner_headers)
    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error", "kind": "InternalError"}
