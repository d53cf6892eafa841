"""Tests for auth and navigation endpoints."""

from mentorhub.modules.users.dependencies import get_user_service
from tests.conftest import auth_header


def test_register_verify_login_flow(client, auth_repository) -> None:
    registered = client.post(
        "/api/auth/register",
        json={"name": "Eve", "email": "eve@example.com", "password": "pa55word", "role": "mentor"},
    )
    assert registered.status_code == 200
    user_id = registered.json()["user"]["id"]

    blocked = client.post("/api/auth/login", json={"email": "eve@example.com", "password": "pa55word"})
    assert blocked.status_code == 403

    token = auth_repository.users[user_id]["verification_token"]
    verified = client.post("/api/auth/verify-email", json={"token": token})
    assert verified.status_code == 200

    login = client.post("/api/auth/login", json={"email": "eve@example.com", "password": "pa55word"})
    assert login.status_code == 200
    body = login.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "mentor"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "eve@example.com"


def test_register_validates_payload(client) -> None:
    response = client.post(
        "/api/auth/register",
        json={"name": "Eve", "email": "not-an-email", "password": "x", "role": "mentee"},
    )

    assert response.status_code == 422


def test_resend_verification_endpoint(client, email_service) -> None:
    client.post(
        "/api/auth/register",
        json={"name": "Eve", "email": "eve@example.com", "password": "pa55word", "role": "mentee"},
    )

    response = client.post("/api/auth/resend-verification", json={"email": "eve@example.com"})

    assert response.status_code == 200
    assert len(email_service.verifications) == 2


def test_me_rejects_invalid_token(client) -> None:
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.token"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_anonymous_navigation(client) -> None:
    response = client.get("/api/navigation", params={"path": "/mentors"})

    assert response.status_code == 200
    body = response.json()
    assert body["authenticated"] is False
    assert [i["name"] for i in body["items"]] == ["Home", "About", "Team", "Mentors", "Blog", "FAQ", "Contact"]
    assert [i["path"] for i in body["items"] if i["active"]] == ["/mentors"]
    assert [i["path"] for i in body["account_items"]] == ["/auth/signin", "/auth/signup"]


def test_mentor_navigation(client, mentor) -> None:
    response = client.get("/api/navigation", headers=auth_header(mentor))

    body = response.json()
    assert body["authenticated"] is True
    assert body["user_name"] == "Ada Mentor"
    assert [(i["name"], i["path"]) for i in body["account_items"]] == [
        ("Dashboard", "/dashboard/mentor"),
        ("Profile", "/profile/mentor"),
    ]


def test_mentee_navigation(client, mentee) -> None:
    response = client.get("/api/navigation", headers=auth_header(mentee), params={"path": "/dashboard/mentee"})

    body = response.json()
    assert body["account_items"] == [{"name": "Dashboard", "path": "/dashboard/mentee", "active": True}]
    assert body["items"][0]["active"] is False


def test_user_service_dependency_stands_alone() -> None:
    navigation = get_user_service().get_navigation(path="/about")

    assert navigation.authenticated is False
    assert [i.path for i in navigation.items if i.active] == ["/about"]
