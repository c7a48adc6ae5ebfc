import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from main import app
from models.log import Log
from utils.users_service import UsersServiceClient, get_users_service


@pytest.fixture
def service_calls():
    return []


@pytest.fixture
def users_service(service_calls):
    def handler(request: httpx.Request) -> httpx.Response:
        service_calls.append((request.method, request.url.path, request.headers.get("x-api-key")))
        path = request.url.path
        if path == "/users/me":
            if request.headers.get("authorization") == "Bearer good-token":
                return httpx.Response(200, json={"id": "user-1", "email": "ann@x.com", "name": "Ann"})
            return httpx.Response(401, json={"error": "invalid session"})
        if path == "/sessions" and request.method == "POST":
            code = json.loads(request.content).get("code")
            if code == "valid-code":
                return httpx.Response(200, json={"session_token": "good-token"})
            if code == "service-down":
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(400, json={"error": "bad code"})
        if path == "/sessions" and request.method == "DELETE":
            return httpx.Response(204)
        if path == "/oauth/google/redirect_url":
            return httpx.Response(200, json={"redirect_url": "https://accounts.example/auth"})
        return httpx.Response(404)

    return UsersServiceClient(
        api_url="http://users.test", api_key="test-key", transport=httpx.MockTransport(handler)
    )


@pytest.fixture
def auth_client(override_db, users_service):
    app.dependency_overrides[get_users_service] = lambda: users_service
    with TestClient(app) as c:
        yield c


def test_client_resolves_session(users_service, service_calls):
    user = asyncio.run(users_service.get_current_user("good-token"))
    assert user["id"] == "user-1"
    assert service_calls == [("GET", "/users/me", "test-key")]


def test_client_rejected_session_is_none(users_service):
    assert asyncio.run(users_service.get_current_user("stale")) is None


def test_client_code_exchange_error_propagates(users_service):
    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(users_service.exchange_code_for_session_token("nope"))


def test_missing_credentials_is_401(auth_client):
    resp = auth_client.get("/api/products")
    assert resp.status_code == 401


def test_invalid_token_is_401(auth_client):
    resp = auth_client.get("/api/products", headers={"Authorization": "Bearer stale"})
    assert resp.status_code == 401


def test_bearer_token_resolves_user(auth_client):
    resp = auth_client.get("/api/users/me", headers={"Authorization": "Bearer good-token"})
    assert resp.status_code == 200
    assert resp.json()["id"] == "user-1"
    assert resp.json()["email"] == "ann@x.com"


def test_session_cookie_scopes_data(auth_client):
    auth_client.cookies.set("session_token", "good-token")
    created = auth_client.post(
        "/api/products", json={"name": "Widget", "price": 1, "category": "Tools", "stock_quantity": 1}
    )
    assert created.status_code == 201
    assert created.json()["user_id"] == "user-1"


def test_create_session_sets_cookie(auth_client):
    resp = auth_client.post("/api/sessions", json={"code": "valid-code"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    cookie = resp.headers["set-cookie"]
    assert "session_token=good-token" in cookie
    assert "HttpOnly" in cookie


def test_create_session_without_code(auth_client):
    assert auth_client.post("/api/sessions", json={}).status_code == 400


def test_create_session_with_bad_code(auth_client):
    assert auth_client.post("/api/sessions", json={"code": "nope"}).status_code == 401


def test_create_session_with_bad_code_is_audited(auth_client, db_session):
    resp = auth_client.post("/api/sessions", json={"code": "nope"})

    assert resp.json() == {"detail": "Invalid authorization code"}
    entry = db_session.query(Log).one()
    assert (entry.action, entry.status) == ("LOGIN", "FAIL")
    assert entry.meta == {"reason": "code exchange 400"}


def test_create_session_service_unreachable(auth_client, db_session):
    resp = auth_client.post("/api/sessions", json={"code": "service-down"})

    assert resp.status_code == 502
    assert resp.json() == {"detail": "Identity service unavailable"}
    assert "set-cookie" not in resp.headers
    assert db_session.query(Log).count() == 0


def test_redirect_url(auth_client):
    resp = auth_client.get("/api/oauth/google/redirect_url")
    assert resp.json() == {"redirectUrl": "https://accounts.example/auth"}


def test_logout_invalidates_and_clears(auth_client, service_calls):
    auth_client.cookies.set("session_token", "good-token")
    resp = auth_client.get("/api/logout")

    assert resp.status_code == 200
    assert ("DELETE", "/sessions", "test-key") in service_calls
    assert "Max-Age=0" in resp.headers["set-cookie"]
