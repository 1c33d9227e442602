"""Tests for the authentication token endpoint."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from app.domain.entities import UserRole
from app.infrastructure.models import UserModel
from app.infrastructure.security import decode_access_token, get_password_hash
from main import create_app

EMAIL = "sam.one@example.com"
PASSWORD = "StrongPass123"


@pytest.fixture()
def client():
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.mark.parametrize(
    "role", [UserRole.MANAGEMENT, UserRole.PROFESSOR, UserRole.STUDENT, UserRole.ALUMNI]
)
def test_login_returns_role_alias(client, make_user, role: UserRole) -> None:
    make_user(role, "Sam One", email=EMAIL)

    response = client.post(
        "/auth/token",
        data={"username": EMAIL, "password": PASSWORD},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["token_type"] == "bearer"
    assert payload["role"] == role.alias
    claims = decode_access_token(payload["access_token"])
    assert claims["sub"] == EMAIL
    assert claims["role"] == role.alias


def test_login_records_last_login(client, make_user, session) -> None:
    user = make_user(UserRole.STUDENT, "Sam One", email=EMAIL)
    assert user.last_login is None

    client.post("/auth/token", data={"username": EMAIL, "password": PASSWORD})

    stored = session.get(UserModel, user.id)
    assert stored.last_login is not None


def test_wrong_password_is_rejected(client, make_user) -> None:
    make_user(UserRole.STUDENT, "Sam One", email=EMAIL)

    response = client.post("/auth/token", data={"username": EMAIL, "password": "wrong"})

    assert response.status_code == 401


def test_unknown_email_is_rejected(client) -> None:
    response = client.post(
        "/auth/token", data={"username": "nobody@example.com", "password": PASSWORD}
    )

    assert response.status_code == 401


def test_inactive_user_cannot_login(client, make_user) -> None:
    make_user(UserRole.STUDENT, "Sam One", email=EMAIL, is_active=False)

    response = client.post("/auth/token", data={"username": EMAIL, "password": PASSWORD})

    assert response.status_code == 403


def test_password_change_invalidates_existing_token(client, make_user, session) -> None:
    user = make_user(UserRole.STUDENT, "Sam One", email=EMAIL)
    token = client.post(
        "/auth/token", data={"username": EMAIL, "password": PASSWORD}
    ).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}
    assert client.get("/circulars/unread-count", headers=headers).status_code == 200

    session.query(UserModel).filter(UserModel.id == user.id).update(
        {UserModel.password: get_password_hash("AnotherPass456")}
    )
    session.commit()

    response = client.get("/circulars/unread-count", headers=headers)

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"
