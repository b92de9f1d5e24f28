from tubely.auth import create_access_token, decode_token, hash_password, verify_password
from tubely.config import get_settings


def test_password_hash_roundtrip():
    hashed = hash_password("hunter22")
    assert hashed != "hunter22"
    assert verify_password("hunter22", hashed)
    assert not verify_password("hunter23", hashed)
    assert not verify_password("hunter22", None)


def test_token_carries_user_id():
    settings = get_settings()
    payload = decode_token(create_access_token("user-1", settings), settings)
    assert payload.sub == "user-1"
    assert payload.iss == "tubely-access"


def test_token_signed_with_other_secret_is_rejected():
    other = get_settings().model_copy(update={"secret_key": "someone-else"})
    assert decode_token(create_access_token("user-1", other), get_settings()) is None


def test_expired_token_is_rejected():
    expired = get_settings().model_copy(update={"access_token_expire_minutes": -5})
    assert decode_token(create_access_token("user-1", expired), get_settings()) is None


def test_register_and_login(client):
    res = client.post("/api/users", json={"email": "Admin@Tubely.com", "password": "password"})
    assert res.status_code == 201
    body = res.json()
    assert body["email"] == "admin@tubely.com"
    assert "password" not in body

    res = client.post("/api/login", json={"email": "admin@tubely.com", "password": "password"})
    assert res.status_code == 200
    token = res.json()["access_token"]
    assert decode_token(token, get_settings()).sub == body["id"]


def test_register_duplicate_email(client, owner):
    res = client.post("/api/users", json={"email": "owner@example.com", "password": "password"})
    assert res.status_code == 400
    assert res.json()["kind"] == "BadRequest"


def test_register_short_password(client):
    res = client.post("/api/users", json={"email": "a@b.c", "password": "123"})
    assert res.status_code == 400


def test_login_wrong_password(client, owner):
    res = client.post("/api/login", json={"email": "owner@example.com", "password": "wrong-password"})
    assert res.status_code == 401
    assert res.json() == {"error": "Incorrect email or password", "kind": "Unauthenticated"}
    assert res.headers["www-authenticate"] == "Bearer"


def test_missing_token(client):
    res = client.get("/api/videos")
    assert res.status_code == 401
    assert res.json() == {"error": "Couldn't find JWT", "kind": "Unauthenticated"}


def test_invalid_token(client):
    res = client.get("/api/videos", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401
    assert res.json()["kind"] == "Unauthenticated"


def test_invalid_json_body_is_bad_request(client):
    res = client.post("/api/users", json={"email": "a@example.com"})
    assert res.status_code == 400
    body = res.json()
    assert body["kind"] == "BadRequest"
    assert "password" in body["error"]
