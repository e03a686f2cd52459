# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from userhub.domain.users.entities import TokenPair, User
from userhub.domain.users.exceptions import InvalidCredentialsError
from userhub.domain.users.repositories import PasswordHasher, TokenCodec, UserRepository
from userhub.shared.errors import InternalError, NotFoundError, ValidationError
from userhub.shared.logging import logger


@dataclass(slots=True, frozen=True)
class LoginResult:
    user: User
    tokens: TokenPair


def issue_token_pair(users: UserRepository, tokens: TokenCodec, user: User) -> TokenPair:
    """Mint a fresh pair and overwrite the user's refresh-token slot."""
    try:
        pair = TokenPair(
            access_token=tokens.issue_access_token(user),
            refresh_token=tokens.issue_refresh_token(user),
        )
        stored = users.store_refresh_token(user.id, pair.refresh_token)
    except Exception as exc:
        logger.exception(f"auth.tokens: issue failed user_id={user.id}")
        raise InternalError(
            "Something went wrong while generating Access and Refresh Token"
        ) from exc
    if not stored:
        raise InternalError("Something went wrong while generating Access and Refresh Token")
    return pair


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenCodec,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher

    def execute(self, username: str | None, email: str | None, password: str | None) -> LoginResult:
        username = (username or "").strip().lower() or None
        email = (email or "").strip() or None

        if not username and not email:
            raise ValidationError("Missing Username or Email")
        if not password:
            raise ValidationError("Missing Password")

        user = self._users.find_by_username_or_email(username, email)
        if not user:
            raise NotFoundError("Invalid Username or Email")

        if not self._password_hasher.verify(password, user.password_hash):
            logger.info(f"auth.login: bad password user_id={user.id}")
            raise InvalidCredentialsError()

        pair = issue_token_pair(self._users, self._tokens, user)
        logger.info(f"auth.login: ok user_id={user.id}")
        return LoginResult(user=user, tokens=pair)
