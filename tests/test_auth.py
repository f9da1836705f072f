"""Tests for Supabase Auth wrapping: register, login, token lookup and its cache."""

from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from app.main import app
from app.database.supabase_client import get_auth_client
from app.modules.auth.schemas import RegisterRequest
from app.modules.auth.service import AuthService, TokenCache


class FakeAuth:
    def __init__(self):
        self.accounts = {}
        self.get_user_calls = 0
        self.signed_out = False

    def _user(self, email):
        account = self.accounts[email]
        return SimpleNamespace(id=account["id"], email=email, user_metadata=account["metadata"])

    def sign_up(self, credentials):
        email = credentials["email"]
        if email in self.accounts:
            raise Exception("User already registered")
        self.accounts[email] = {
            "id": f"user-{len(self.accounts) + 1}",
            "password": credentials["password"],
            "metadata": credentials["options"]["data"],
        }
        return SimpleNamespace(user=self._user(email), session=None)

    def sign_in_with_password(self, credentials):
        account = self.accounts.get(credentials["email"])
        if account is None or account["password"] != credentials["password"]:
            raise Exception("Invalid login credentials")
        session = SimpleNamespace(access_token=f"token-{account['id']}")
        return SimpleNamespace(user=self._user(credentials["email"]), session=session)

    def get_user(self, jwt):
        self.get_user_calls += 1
        for email, account in self.accounts.items():
            if jwt == f"token-{account['id']}":
                return SimpleNamespace(user=self._user(email))
        raise Exception("invalid JWT: token is expired")

    def sign_out(self):
        self.signed_out = True


@pytest.fixture
def auth():
    return FakeAuth()


@pytest.fixture
def service(auth):
    return AuthService(SimpleNamespace(auth=auth), cache=TokenCache(ttl_sec=60))


@pytest.fixture
def auth_client(auth):
    app.dependency_overrides[get_auth_client] = lambda: SimpleNamespace(auth=auth)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestAuthService:
    def test_register_strips_full_name(self, service, auth):
        response = service.register(RegisterRequest(email="ruth@example.com", password="secret123", full_name="  Ruth  "))

        assert response.user_id == "user-1"
        assert auth.accounts["ruth@example.com"]["metadata"] == {"full_name": "Ruth"}

    def test_register_twice(self, service):
        request = RegisterRequest(email="ruth@example.com", password="secret123")
        service.register(request)

        with pytest.raises(HTTPException) as exc_info:
            service.register(request)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "User already exists"

    def test_token_lookup_is_cached(self, service, auth):
        service.register(RegisterRequest(email="ruth@example.com", password="secret123"))

        first = service.get_current_user("token-user-1")
        second = service.get_current_user("token-user-1")

        assert first == second
        assert first["id"] == "user-1"
        assert auth.get_user_calls == 1

    def test_logout_drops_cached_token(self, service, auth):
        service.register(RegisterRequest(email="ruth@example.com", password="secret123"))
        service.get_current_user("token-user-1")

        assert service.logout("token-user-1") is True
        service.get_current_user("token-user-1")

        assert auth.signed_out is True
        assert auth.get_user_calls == 2

    def test_unknown_token(self, service):
        with pytest.raises(HTTPException) as exc_info:
            service.get_current_user("token-nobody")
        assert exc_info.value.status_code == 401


class TestTokenCache:
    def test_expired_entry_is_dropped(self):
        cache = TokenCache(ttl_sec=0)
        cache.put("abc", {"id": "user-1"})
        assert cache.get("abc") is None

    def test_full_cache_skips_new_entries(self):
        cache = TokenCache(ttl_sec=60, max_size=1)
        cache.put("first", {"id": "user-1"})
        cache.put("second", {"id": "user-2"})
        assert cache.get("first") == {"id": "user-1"}
        assert cache.get("second") is None


@pytest.mark.api
class TestAuthRoutes:
    def test_register_then_login(self, auth_client):
        registered = auth_client.post("/api/v1/auth/register", json={
            "email": "ruth@example.com", "password": "secret123", "full_name": "Ruth"
        })
        login = auth_client.post("/api/v1/auth/login", json={"email": "ruth@example.com", "password": "secret123"})

        assert registered.status_code == 201
        assert login.status_code == 200
        assert login.json()["access_token"] == "token-user-1"
        assert login.json()["token_type"] == "bearer"

    def test_wrong_password(self, auth_client):
        auth_client.post("/api/v1/auth/register", json={"email": "ruth@example.com", "password": "secret123"})
        response = auth_client.post("/api/v1/auth/login", json={"email": "ruth@example.com", "password": "nope"})
        assert response.status_code == 401

    def test_missing_bearer_token(self, auth_client):
        assert auth_client.get("/api/v1/auth/me").status_code in (401, 403)
