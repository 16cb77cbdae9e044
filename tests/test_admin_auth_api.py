"""Integration tests for administrator authentication and role gates."""

from fastapi.testclient import TestClient

from conftest import ADMIN_EMAIL, API, admin_login, bearer, register_active_user
from storefront.core.app_factory import create_application
from storefront.domain.models import Role


class TestAdminLogin:
    def test_seeded_admin_can_login(self, client):
        body = admin_login(client)

        assert body["message"] == "Admin login successful"
        assert body["user"]["role"] == "admin"
        assert body["user"]["email"] == ADMIN_EMAIL

    def test_wrong_password(self, client):
        response = client.post(
            f"{API}/admin/auth/login",
            json={"email": ADMIN_EMAIL, "password": "wrong-password"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid credentials"

    def test_customer_cannot_login_as_admin(self, client, user_token):
        response = client.post(
            f"{API}/admin/auth/login",
            json={"email": "shopper@example.com", "password": "Secret123"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid credentials"

    def test_inactive_admin_rejected(self, client, database):
        with database.transaction():
            database.execute("UPDATE users SET is_active = 0 WHERE role = ?", (Role.ADMIN.value,))

        response = client.post(
            f"{API}/admin/auth/login",
            json={"email": ADMIN_EMAIL, "password": "AdminPass123"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Your account is inactive"

    def test_no_admin_without_seeding(self, settings):
        settings.seed_admin_enabled = False
        with TestClient(create_application(settings)) as fresh:
            response = fresh.post(
                f"{API}/admin/auth/login",
                json={"email": ADMIN_EMAIL, "password": "AdminPass123"},
            )
        assert response.status_code == 400


class TestAdminSession:
    def test_me(self, client, admin_token):
        response = client.get(f"{API}/admin/auth/me", headers=bearer(admin_token))

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "admin"

    def test_refresh_rotates(self, client):
        session = admin_login(client)
        first = client.post(f"{API}/admin/auth/refresh-token", json={"refreshToken": session["refreshToken"]})
        second = client.post(f"{API}/admin/auth/refresh-token", json={"refreshToken": session["refreshToken"]})

        assert first.status_code == 200
        assert second.status_code == 401

    def test_refresh_ignores_stale_access_token(self, client):
        session = admin_login(client)
        response = client.post(
            f"{API}/admin/auth/refresh-token",
            json={"refreshToken": session["refreshToken"]},
            headers=bearer("expired-or-garbage"),
        )

        assert response.status_code == 200
        assert response.json()["refreshToken"] != session["refreshToken"]

    def test_customer_refresh_token_rejected(self, client, outbox):
        session = register_active_user(client, outbox)
        response = client.post(f"{API}/admin/auth/refresh-token", json={"refreshToken": session["refreshToken"]})

        assert response.status_code == 401
        assert response.json()["message"] == "User not found or not an admin"

    def test_logout(self, client):
        session = admin_login(client)
        response = client.post(f"{API}/admin/auth/logout", headers=bearer(session["accessToken"]))

        assert response.status_code == 200
        refreshed = client.post(f"{API}/admin/auth/refresh-token", json={"refreshToken": session["refreshToken"]})
        assert refreshed.status_code == 401


class TestRoleGates:
    def test_missing_token(self, client):
        response = client.get(f"{API}/admin/auth/me")

        assert response.status_code == 401
        assert response.json() == {"error": True, "message": "No token, authorization denied"}

    def test_malformed_token(self, client):
        response = client.get(f"{API}/admin/auth/me", headers=bearer("garbage"))

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_customer_token_on_admin_route(self, client, user_token):
        response = client.get(f"{API}/admin/auth/me", headers=bearer(user_token))

        assert response.status_code == 403
        assert response.json()["message"] == "Access denied. Admin only"

    def test_admin_token_on_customer_route(self, client, admin_token):
        response = client.get(f"{API}/user/auth/me", headers=bearer(admin_token))

        assert response.status_code == 403
        assert response.json()["message"] == "Access denied. User only"

    def test_deactivated_admin_loses_access(self, client, admin_token, database):
        with database.transaction():
            database.execute("UPDATE users SET is_active = 0 WHERE role = ?", (Role.ADMIN.value,))

        response = client.get(f"{API}/admin/auth/me", headers=bearer(admin_token))
        assert response.status_code == 403
        assert response.json()["message"] == "Account is locked or inactive"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True}
