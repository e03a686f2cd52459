"""Resolve the caller behind an access token."""

from __future__ import annotations

from userhub.domain.users.entities import TokenType, User
from userhub.domain.users.exceptions import InvalidTokenError
from userhub.domain.users.repositories import TokenCodec, UserRepository
from userhub.shared.errors import UnauthorizedError


class AuthenticateUserUseCase:
    def __init__(self, *, users: UserRepository, tokens: TokenCodec) -> None:
        self._users = users
        self._tokens = tokens

    def execute(self, access_token: str | None) -> User:
        if not access_token:
            raise UnauthorizedError("Unauthorized Request")

        try:
            claims = self._tokens.verify(access_token, TokenType.ACCESS)
        except InvalidTokenError as exc:
            raise UnauthorizedError("Invalid Access Token") from exc

        user = self._users.find_by_id(claims.subject)
        if not user:
            raise UnauthorizedError("Invalid Access Token")
        return user
