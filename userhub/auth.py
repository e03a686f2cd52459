# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from functools import wraps
from typing import cast

from flask import Flask, Request, current_app, g, request

from userhub.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from userhub.domain.users.entities import User
from userhub.shared.errors import UnauthorizedError
from userhub.shared.logging import logger

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

_EXTENSION_KEY = "userhub.authenticate"


def install_authenticator(app: Flask, authenticate: AuthenticateUserUseCase) -> None:
    app.extensions[_EXTENSION_KEY] = authenticate


class AuthedRequest(Request):
    user: User
    user_id: str


def authed_request() -> AuthedRequest:
    """Return the current request cast to include authentication attributes."""
    return cast(AuthedRequest, request)


def _access_token() -> str:
    token = request.cookies.get(ACCESS_TOKEN_COOKIE, "")
    if not token:
        auth = request.headers.get("Authorization", "")
        if auth.startswith("Bearer "):
            token = auth[7:].strip()
    return token


def auth_required(f):
    @wraps(f)
    def inner(*a, **kw):
        authenticate: AuthenticateUserUseCase = current_app.extensions[_EXTENSION_KEY]
        try:
            user = authenticate.execute(_access_token())
        except UnauthorizedError as exc:
            logger.warning(
                f"Auth failed ({exc.message}) on {request.method} {request.path} "
                f"from {request.headers.get('X-Forwarded-For', request.remote_addr)}"
            )
            raise

        request.user = user
        request.user_id = user.id
        g.user_id = user.id
        logger.debug(f"Auth OK: user={user.id} {request.method} {request.path}")
        return f(*a, **kw)

    return inner
