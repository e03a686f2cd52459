# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""JWT signing and verification for access and refresh tokens.

Access and refresh tokens are signed with independent secrets so a leaked
access secret cannot mint refresh tokens. Every token carries a random
``jti`` so two tokens issued for the same user in the same second differ.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from userhub.domain.users.entities import TokenClaims, TokenType, User
from userhub.domain.users.exceptions import InvalidTokenError, TokenExpiredError
from userhub.domain.users.repositories import TokenCodec
from userhub.shared.config import TokenConfig


class JwtTokenCodec(TokenCodec):
    def __init__(
        self,
        *,
        access_secret: str,
        access_expiry: timedelta,
        refresh_secret: str,
        refresh_expiry: timedelta,
        algorithm: str = "HS256",
    ) -> None:
        self._keys = {
            TokenType.ACCESS: (access_secret, access_expiry),
            TokenType.REFRESH: (refresh_secret, refresh_expiry),
        }
        self._algorithm = algorithm

    @classmethod
    def from_config(cls, config: TokenConfig) -> "JwtTokenCodec":
        return cls(
            access_secret=config.access_secret,
            access_expiry=config.access_expiry,
            refresh_secret=config.refresh_secret,
            refresh_expiry=config.refresh_expiry,
            algorithm=config.algorithm,
        )

    def issue_access_token(self, user: User) -> str:
        return self._encode(
            user.id,
            TokenType.ACCESS,
            {"username": user.username, "email": user.email},
        )

    def issue_refresh_token(self, user: User) -> str:
        return self._encode(user.id, TokenType.REFRESH)

    def verify(self, token: str, kind: TokenType) -> TokenClaims:
        secret, _ = self._keys[kind]
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat", "typ"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError(f"{kind.value.capitalize()} Token Expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError(f"Invalid {kind.value.capitalize()} Token") from exc

        if payload.get("typ") != kind.value:
            raise InvalidTokenError(f"Invalid {kind.value.capitalize()} Token")

        return TokenClaims(
            subject=str(payload["sub"]),
            token_type=kind,
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )

    def _encode(self, subject: str, kind: TokenType, extra: dict[str, Any] | None = None) -> str:
        secret, lifetime = self._keys[kind]
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": subject,
            "typ": kind.value,
            "iat": now,
            "exp": now + lifetime,
            "jti": uuid.uuid4().hex,
        }
        if extra:
            payload.update(extra)
        return jwt.encode(payload, secret, algorithm=self._algorithm)
