from __future__ import annotations

import io
from dataclasses import dataclass

import pytest
from flask import Flask

from userhub.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from userhub.application.use_cases.users.change_password import ChangePasswordUseCase
from userhub.application.use_cases.users.get_user_profile import GetUserProfileUseCase
from userhub.application.use_cases.users.login_user import LoginUserUseCase
from userhub.application.use_cases.users.logout_user import LogoutUserUseCase
from userhub.application.use_cases.users.refresh_session import RefreshSessionUseCase
from userhub.application.use_cases.users.register_user import RegisterUserUseCase
from userhub.application.use_cases.users.update_avatar import UpdateAvatarUseCase
from userhub.auth import install_authenticator
from userhub.interfaces.http.controllers.users_controller import UsersController
from userhub.shared.middleware.error_handler import configure_error_handling
from userhub.tests.fakes import (
    DeterministicHasher,
    InMemoryAvatarStorage,
    InMemoryUserRepository,
    make_codec,
    seed_user,
)


@dataclass
class Harness:
    app: Flask
    users: InMemoryUserRepository
    avatars: InMemoryAvatarStorage


@pytest.fixture()
def harness(reset_database) -> Harness:
    users = InMemoryUserRepository()
    avatars = InMemoryAvatarStorage()
    codec = make_codec()
    hasher = DeterministicHasher()

    app = Flask(__name__)
    configure_error_handling(app)
    install_authenticator(app, AuthenticateUserUseCase(users=users, tokens=codec))
    controller = UsersController(
        register_use_case=RegisterUserUseCase(
            users=users, password_hasher=hasher, avatars=avatars
        ),
        login_use_case=LoginUserUseCase(users=users, tokens=codec, password_hasher=hasher),
        refresh_use_case=RefreshSessionUseCase(users=users, tokens=codec),
        logout_use_case=LogoutUserUseCase(users=users),
        change_password_use_case=ChangePasswordUseCase(users=users, password_hasher=hasher),
        update_avatar_use_case=UpdateAvatarUseCase(users=users, avatars=avatars),
        get_profile_use_case=GetUserProfileUseCase(users=users),
    )
    app.register_blueprint(controller.as_blueprint())
    return Harness(app=app, users=users, avatars=avatars)


def _login(client, username: str = "alice", password: str = "secret123"):
    return client.post("/api/v1/users/login", json={"username": username, "password": password})


def test_register_multipart_returns_public_user(harness: Harness) -> None:
    with harness.app.test_client() as client:
        response = client.post(
            "/api/v1/users/register",
            data={
                "username": "Alice",
                "email": "alice@example.com",
                "fullName": "Alice Liddell",
                "password": "secret123",
                "avatar": (io.BytesIO(b"\x89PNG fake"), "me.png"),
            },
            content_type="multipart/form-data",
        )

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["success"] is True
    assert payload["message"] == "User Registered Successfully!"
    user = payload["data"]
    assert user["username"] == "alice"
    assert user["fullName"] == "Alice Liddell"
    assert "passwordHash" not in user and "password_hash" not in user
    assert "refreshToken" not in user
    assert harness.avatars.uploaded[0].name.endswith("-me.png")


def test_register_lists_all_missing_fields(harness: Harness) -> None:
    with harness.app.test_client() as client:
        response = client.post(
            "/api/v1/users/register",
            data={"fullName": "Alice"},
            content_type="multipart/form-data",
        )

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["success"] is False
    assert payload["data"] is None
    assert payload["errors"]["fields"] == ["username", "email", "password"]


def test_register_conflict_is_409(harness: Harness) -> None:
    seed_user(harness.users)

    with harness.app.test_client() as client:
        response = client.post(
            "/api/v1/users/register",
            data={
                "username": "alice",
                "email": "other@example.com",
                "fullName": "Alice",
                "password": "pw",
                "avatar": (io.BytesIO(b"img"), "a.png"),
            },
            content_type="multipart/form-data",
        )

    assert response.status_code == 409
    assert response.get_json()["message"] == "User already exists"
    assert len(harness.avatars.discarded) == 1


def test_login_sets_secure_httponly_cookies(harness: Harness) -> None:
    seed_user(harness.users)

    with harness.app.test_client() as client:
        response = _login(client)

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["accessToken"] and data["refreshToken"]
    assert "password" not in data["user"] and "refreshToken" not in data["user"]

    cookies = response.headers.getlist("Set-Cookie")
    access = next(c for c in cookies if c.startswith("accessToken="))
    refresh = next(c for c in cookies if c.startswith("refreshToken="))
    for cookie in (access, refresh):
        assert "HttpOnly" in cookie
        assert "Secure" in cookie
    assert "Max-Age=900" in access
    assert "Max-Age=864000" in refresh


def test_login_error_envelope(harness: Harness) -> None:
    seed_user(harness.users)

    with harness.app.test_client() as client:
        missing = client.post("/api/v1/users/login", json={"password": "x"})
        wrong = _login(client, password="nope")
        unknown = _login(client, username="ghost")

    assert missing.status_code == 400
    assert missing.get_json()["message"] == "Missing Username or Email"
    assert wrong.status_code == 401
    assert wrong.get_json()["message"] == "Incorrect Password"
    assert unknown.status_code == 404


def test_form_encoded_login_and_refresh(harness: Harness) -> None:
    seed_user(harness.users)

    with harness.app.test_client(use_cookies=False) as client:
        login = client.post(
            "/api/v1/users/login", data={"username": "alice", "password": "secret123"}
        )
        tokens = login.get_json()["data"]
        refreshed = client.post(
            "/api/v1/users/refresh-token", data={"refreshToken": tokens["refreshToken"]}
        )

    assert login.status_code == 200
    assert tokens["user"]["username"] == "alice"
    assert refreshed.status_code == 200
    assert refreshed.get_json()["data"]["refreshToken"] != tokens["refreshToken"]


def test_refresh_reads_cookie_before_body(harness: Harness) -> None:
    seed_user(harness.users)

    with harness.app.test_client(use_cookies=False) as client:
        tokens = _login(client).get_json()["data"]
        response = client.post(
            "/api/v1/users/refresh-token",
            json={"refreshToken": "ignored"},
            headers={"Cookie": f"refreshToken={tokens['refreshToken']}"},
        )

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["message"] == "Access Token Refreshed!"
    assert payload["data"]["refreshToken"] != tokens["refreshToken"]
    assert any(c.startswith("refreshToken=") for c in response.headers.getlist("Set-Cookie"))


def test_refresh_without_token_is_401(harness: Harness) -> None:
    with harness.app.test_client(use_cookies=False) as client:
        response = client.post("/api/v1/users/refresh-token")

    assert response.status_code == 401
    assert response.get_json()["message"] == "Unauthorized Request"


def test_protected_routes_require_access_token(harness: Harness) -> None:
    with harness.app.test_client(use_cookies=False) as client:
        response = client.get("/api/v1/users/current-user")
        bad = client.get(
            "/api/v1/users/current-user", headers={"Authorization": "Bearer nonsense"}
        )

    assert response.status_code == 401
    assert response.get_json()["message"] == "Unauthorized Request"
    assert bad.status_code == 401
    assert bad.get_json()["message"] == "Invalid Access Token"


def test_logout_clears_cookies_and_slot(harness: Harness) -> None:
    user = seed_user(harness.users)

    with harness.app.test_client(use_cookies=False) as client:
        access = _login(client).get_json()["data"]["accessToken"]
        response = client.post(
            "/api/v1/users/logout", headers={"Authorization": f"Bearer {access}"}
        )

    assert response.status_code == 200
    assert response.get_json()["message"] == "User Logged Out!"
    cleared = response.headers.getlist("Set-Cookie")
    assert any(c.startswith("accessToken=;") for c in cleared)
    assert any(c.startswith("refreshToken=;") for c in cleared)
    assert harness.users.find_by_id(user.id).refresh_token is None


def test_change_password_and_current_user(harness: Harness) -> None:
    user = seed_user(harness.users)

    with harness.app.test_client(use_cookies=False) as client:
        access = _login(client).get_json()["data"]["accessToken"]
        headers = {"Authorization": f"Bearer {access}"}
        wrong = client.post(
            "/api/v1/users/change-password",
            json={"oldPassword": "nope", "newPassword": "next"},
            headers=headers,
        )
        changed = client.post(
            "/api/v1/users/change-password",
            json={"oldPassword": "secret123", "newPassword": "next"},
            headers=headers,
        )
        me = client.get("/api/v1/users/current-user", headers=headers)

    assert wrong.status_code == 401
    assert wrong.get_json()["message"] == "Invalid Password"
    assert changed.status_code == 200
    assert harness.users.find_by_id(user.id).password_hash == "hashed:next"
    assert me.get_json()["data"]["id"] == user.id
    assert me.get_json()["message"] == "Current User Fetched Successfully!"


def test_update_avatar_and_profile(harness: Harness) -> None:
    user = seed_user(harness.users)

    with harness.app.test_client(use_cookies=False) as client:
        access = _login(client).get_json()["data"]["accessToken"]
        headers = {"Authorization": f"Bearer {access}"}
        missing = client.patch("/api/v1/users/update-avatar", headers=headers)
        updated = client.patch(
            "/api/v1/users/update-avatar",
            data={"avatar": (io.BytesIO(b"img"), "new.png")},
            content_type="multipart/form-data",
            headers=headers,
        )
        profile = client.get("/api/v1/users/u/alice", headers=headers)
        ghost = client.get("/api/v1/users/u/ghost", headers=headers)

    assert missing.status_code == 400
    assert missing.get_json()["message"] == "Avatar File Is Missing"
    assert updated.status_code == 200
    assert updated.get_json()["data"]["avatar"].endswith("-new.png")
    assert harness.avatars.deleted == [user.avatar]
    assert profile.get_json()["data"]["user"]["username"] == "alice"
    assert ghost.status_code == 404
    assert ghost.get_json()["message"] == "Invalid User"
