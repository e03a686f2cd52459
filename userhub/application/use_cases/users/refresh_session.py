# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Refresh-token rotation.

The presented token must verify against the refresh secret *and* equal the
value currently held in the user's slot. The new refresh token replaces the
slot through a compare-and-swap keyed on the presented value, so two
concurrent refreshes with the same token cannot both succeed.
"""

from __future__ import annotations

from userhub.domain.users.entities import TokenPair, TokenType
from userhub.domain.users.exceptions import InvalidTokenError, RefreshTokenReusedError
from userhub.domain.users.repositories import TokenCodec, UserRepository
from userhub.shared.errors import UnauthorizedError
from userhub.shared.logging import logger


class RefreshSessionUseCase:
    def __init__(self, *, users: UserRepository, tokens: TokenCodec) -> None:
        self._users = users
        self._tokens = tokens

    def execute(self, refresh_token: str | None) -> TokenPair:
        if not refresh_token:
            raise UnauthorizedError("Unauthorized Request")

        try:
            claims = self._tokens.verify(refresh_token, TokenType.REFRESH)
        except InvalidTokenError as exc:
            logger.info(f"auth.refresh: rejected token ({type(exc).__name__})")
            raise UnauthorizedError("Invalid Refresh Token") from exc

        user = self._users.find_by_id(claims.subject)
        if not user:
            raise UnauthorizedError("Refresh Token Is Invalid")

        if refresh_token != user.refresh_token:
            logger.warning(f"auth.refresh: stale token presented user_id={user.id}")
            raise RefreshTokenReusedError()

        pair = TokenPair(
            access_token=self._tokens.issue_access_token(user),
            refresh_token=self._tokens.issue_refresh_token(user),
        )
        if not self._users.swap_refresh_token(user.id, refresh_token, pair.refresh_token):
            logger.warning(f"auth.refresh: lost rotation race user_id={user.id}")
            raise RefreshTokenReusedError()

        logger.info(f"auth.refresh: ok user_id={user.id}")
        return pair
