from dataclasses import dataclass
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from storefront.core import app_factory
from storefront.core.app_factory import create_application
from storefront.core.config import Settings
from storefront.infrastructure.persistence.sqlite import SQLiteDatabase
from storefront.services.email_service import EmailService

API = "/api/v1"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "AdminPass123"
TEST_SECRET = "storefront-test-secret-key-with-enough-entropy-0123456789"


@dataclass
class SentEmail:
    kind: str
    to_email: str
    username: str
    body: str


class RecordingEmailService(EmailService):
    """Captures outgoing mail instead of talking to SMTP."""

    outbox: List[SentEmail] = []

    def send_otp_email(self, to_email: str, username: str, otp: str, expiry_minutes: int) -> bool:
        self.outbox.append(SentEmail("otp", to_email, username, otp))
        return True

    def send_password_reset_email(
        self, to_email: str, username: str, reset_url: str, expiry_minutes: int
    ) -> bool:
        self.outbox.append(SentEmail("reset", to_email, username, reset_url))
        return True


@pytest.fixture
def outbox() -> List[SentEmail]:
    RecordingEmailService.outbox = []
    return RecordingEmailService.outbox


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Settings:
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "storefront.db"))
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("SEED_ADMIN_ENABLED", "true")
    monkeypatch.setenv("ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setenv("ADMIN_USERNAME", "admin")
    monkeypatch.delenv("SMTP_HOST", raising=False)
    monkeypatch.delenv("API_PREFIX", raising=False)
    return Settings()


@pytest.fixture
def client(settings, outbox, monkeypatch):
    monkeypatch.setattr(app_factory, "EmailService", RecordingEmailService)
    with TestClient(create_application(settings)) as test_client:
        yield test_client


@pytest.fixture
def database(client) -> SQLiteDatabase:
    return client.app.state.container.database


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def latest_otp(outbox: List[SentEmail], email: str) -> str:
    codes = [item.body for item in outbox if item.kind == "otp" and item.to_email == email]
    assert codes, f"no verification code sent to {email}"
    return codes[-1]


def signup(
    client: TestClient,
    username: str = "shopper",
    email: str = "shopper@example.com",
    password: str = "Secret123",
    phone: Optional[str] = None,
) -> dict:
    body = {"username": username, "email": email, "password": password}
    if phone:
        body["phone"] = phone
    response = client.post(f"{API}/user/auth/signup", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def register_active_user(
    client: TestClient,
    outbox: List[SentEmail],
    username: str = "shopper",
    email: str = "shopper@example.com",
    password: str = "Secret123",
) -> dict:
    """Sign up and verify; returns the verify-otp response body."""
    pending = signup(client, username=username, email=email, password=password)
    response = client.post(
        f"{API}/user/auth/verify-otp",
        json={"otp": latest_otp(outbox, email)},
        headers=bearer(pending["accessToken"]),
    )
    assert response.status_code == 200, response.text
    return response.json()


def admin_login(client: TestClient) -> dict:
    response = client.post(
        f"{API}/admin/auth/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def admin_token(client) -> str:
    return admin_login(client)["accessToken"]


@pytest.fixture
def user_token(client, outbox) -> str:
    return register_active_user(client, outbox)["accessToken"]
