"""Integration tests for the auth and users HTTP endpoints."""

import pytest
import pytest_asyncio
from httpx import AsyncClient

from authcore.domain.entities import IdentityRole
from authcore.domain.services import IdentityService
from authcore.infrastructure.persistence import SqlAlchemyUnitOfWork
from authcore.infrastructure.persistence.repositories import (
    IdentityRepository,
    SessionTokenRepository,
)

API = "/api/v1"


async def _register(client: AsyncClient, email: str = "alice@example.com", **overrides):
    payload = {"email": email, "password": "password123", "display_name": "Alice"}
    payload.update(overrides)
    return await client.post(f"{API}/auth/register", json=payload)


async def _login(client: AsyncClient, email: str = "alice@example.com", password="password123"):
    return await client.post(f"{API}/auth/login", json={"email": email, "password": password})


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def tokens(client):
    await _register(client)
    response = await _login(client)
    return response.json()["data"]


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_success(self, client):
        response = await _register(client)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["error"] is None
        assert body["data"]["email"] == "alice@example.com"
        assert body["data"]["role"] == "user"
        assert body["data"]["status"] == "active"
        assert "password_hash" not in body["data"]

    @pytest.mark.asyncio
    async def test_register_duplicate(self, client):
        await _register(client)

        response = await _register(client, email="ALICE@example.com")

        assert response.status_code == 409
        assert response.json()["code"] == "ALREADY_EXISTS"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"email": "not-an-email"},
            {"password": "12345"},
            {"display_name": "A"},
            {"display_name": "A" * 101},
        ],
    )
    async def test_register_validation(self, client, overrides):
        response = await _register(client, **overrides)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "VALIDATION_ERROR"


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_success(self, client):
        await _register(client)

        response = await _login(client)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token_type"] == "Bearer"
        assert data["expires_in"] == 900
        assert data["user"]["email"] == "alice@example.com"
        assert data["access_token"]
        assert data["refresh_token"]

    @pytest.mark.asyncio
    async def test_login_failures_share_one_message(self, client):
        await _register(client)

        wrong_password = await _login(client, password="wrong-password")
        unknown_email = await _login(client, email="nobody@example.com")

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["message"] == "Invalid credentials"


class TestRefresh:
    @pytest.mark.asyncio
    async def test_refresh_rotates(self, client, tokens):
        response = await client.post(
            f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )

        assert response.status_code == 200
        assert response.json()["data"]["refresh_token"] != tokens["refresh_token"]

        replay = await client.post(
            f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert replay.status_code == 401
        assert replay.json()["code"] == "TOKEN_REVOKED"

    @pytest.mark.asyncio
    async def test_refresh_with_garbage(self, client):
        response = await client.post(f"{API}/auth/refresh", json={"refresh_token": "garbage"})

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_TOKEN"


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_requires_access_token(self, client, tokens):
        response = await client.post(
            f"{API}/auth/logout", json={"refresh_token": tokens["refresh_token"]}
        )

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_logout_revokes_refresh_token(self, client, tokens):
        response = await client.post(
            f"{API}/auth/logout",
            json={"refresh_token": tokens["refresh_token"]},
            headers=_bearer(tokens["access_token"]),
        )
        assert response.status_code == 200

        refresh = await client.post(
            f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert refresh.status_code == 401


class TestPasswordReset:
    @pytest.mark.asyncio
    async def test_forgot_password_response_does_not_leak(self, client, notifier):
        await _register(client)

        known = await client.post(
            f"{API}/auth/forgot-password", json={"email": "alice@example.com"}
        )
        unknown = await client.post(
            f"{API}/auth/forgot-password", json={"email": "nobody@example.com"}
        )

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()
        assert len(notifier.sent) == 1

    @pytest.mark.asyncio
    async def test_full_reset_flow(self, client, notifier, tokens):
        await client.post(f"{API}/auth/forgot-password", json={"email": "alice@example.com"})
        reset_token = notifier.last_token

        check = await client.get(f"{API}/auth/reset-password/{reset_token}")
        assert check.status_code == 200
        assert check.json()["data"]["valid"] is True

        reset = await client.post(
            f"{API}/auth/reset-password",
            json={"token": reset_token, "new_password": "new-password456"},
        )
        assert reset.status_code == 200

        reused = await client.post(
            f"{API}/auth/reset-password",
            json={"token": reset_token, "new_password": "another-password789"},
        )
        assert reused.status_code == 400
        assert reused.json()["code"] == "TOKEN_ALREADY_USED"

        refresh = await client.post(
            f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert refresh.status_code == 401
        assert refresh.json()["code"] == "TOKEN_REVOKED"

        assert (await _login(client, password="new-password456")).status_code == 200

    @pytest.mark.asyncio
    async def test_check_unknown_reset_token(self, client):
        response = await client.get(f"{API}/auth/reset-password/unknown-token")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_TOKEN"


class TestUsers:
    @pytest.mark.asyncio
    async def test_profile_round_trip(self, client, tokens):
        headers = _bearer(tokens["access_token"])

        profile = await client.get(f"{API}/users/me", headers=headers)
        assert profile.status_code == 200
        assert profile.json()["data"]["display_name"] == "Alice"

        updated = await client.put(
            f"{API}/users/me", json={"display_name": "Alice Smith"}, headers=headers
        )
        assert updated.status_code == 200
        assert updated.json()["data"]["display_name"] == "Alice Smith"

    @pytest.mark.asyncio
    async def test_change_password(self, client, tokens):
        headers = _bearer(tokens["access_token"])

        wrong = await client.post(
            f"{API}/users/change-password",
            json={"old_password": "wrong-password", "new_password": "new-password456"},
            headers=headers,
        )
        assert wrong.status_code == 401

        changed = await client.post(
            f"{API}/users/change-password",
            json={"old_password": "password123", "new_password": "new-password456"},
            headers=headers,
        )
        assert changed.status_code == 200
        assert (await _login(client, password="new-password456")).status_code == 200

    @pytest.mark.asyncio
    async def test_list_users_requires_admin(self, client, tokens):
        response = await client.get(f"{API}/users", headers=_bearer(tokens["access_token"]))

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_list_users_as_admin(self, client, db_session, password_hasher, tokens):
        service = IdentityService(
            identity_repo=IdentityRepository(db_session),
            session_repo=SessionTokenRepository(db_session),
            unit_of_work=SqlAlchemyUnitOfWork(db_session),
            password_hasher=password_hasher,
        )
        admin, created = await service.create_admin("root@example.com", "admin-pass", "Root")
        assert created is True
        assert admin.role == IdentityRole.ADMIN

        login = await _login(client, email="root@example.com", password="admin-pass")
        headers = _bearer(login.json()["data"]["access_token"])

        response = await client.get(
            f"{API}/users", params={"role": "user", "limit": 5}, headers=headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert [user["email"] for user in data["users"]] == ["alice@example.com"]
        assert data["pagination"] == {"page": 1, "limit": 5, "total": 1, "total_pages": 1}


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
