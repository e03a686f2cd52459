# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .entities import NewUser, StoredAvatar, TokenClaims, TokenType, User


class UserRepository(Protocol):
    def find_by_id(self, user_id: str) -> User | None: ...
    def find_by_username(self, username: str) -> User | None: ...
    def find_by_username_or_email(
        self, username: str | None, email: str | None
    ) -> User | None: ...
    def add(self, user: NewUser) -> User: ...

    def store_refresh_token(self, user_id: str, token: str) -> bool:
        """Unconditionally overwrite the refresh-token slot."""
        ...

    def swap_refresh_token(self, user_id: str, expected: str, token: str) -> bool:
        """Overwrite the slot only while it still holds ``expected``."""
        ...

    def clear_refresh_token(self, user_id: str) -> bool: ...
    def update_password_hash(self, user_id: str, password_hash: str) -> bool: ...
    def update_avatar(self, user_id: str, avatar: str) -> User | None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenCodec(Protocol):
    def issue_access_token(self, user: User) -> str: ...
    def issue_refresh_token(self, user: User) -> str: ...
    def verify(self, token: str, kind: TokenType) -> TokenClaims: ...


class AvatarStorage(Protocol):
    def upload(self, local_path: Path) -> StoredAvatar | None: ...
    def delete(self, url: str) -> bool: ...
    def discard(self, local_path: Path) -> None: ...
