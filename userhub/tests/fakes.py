from __future__ import annotations

import itertools
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from pathlib import Path

from userhub.application.services.token_codec import JwtTokenCodec
from userhub.domain.likes.entities import Like
from userhub.domain.likes.exceptions import DuplicateLikeError
from userhub.domain.likes.repositories import LikeRepository
from userhub.domain.users.entities import NewUser, StoredAvatar, User
from userhub.domain.users.repositories import AvatarStorage, PasswordHasher, UserRepository


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        # Runs between the slot check and the compare-and-swap.
        self.before_swap: Callable[[str], None] | None = None

    def find_by_id(self, user_id: str) -> User | None:
        return self.users.get(user_id)

    def find_by_username(self, username: str) -> User | None:
        return next((u for u in self.users.values() if u.username == username), None)

    def find_by_username_or_email(self, username: str | None, email: str | None) -> User | None:
        for user in self.users.values():
            if (username and user.username == username) or (email and user.email == email):
                return user
        return None

    def add(self, user: NewUser) -> User:
        now = datetime.now(UTC)
        created = User(
            id=str(uuid.uuid4()),
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            password_hash=user.password_hash,
            avatar=user.avatar,
            project_name=user.project_name,
            project_url=user.project_url,
            created_at=now,
            updated_at=now,
        )
        self.users[created.id] = created
        return created

    def store_refresh_token(self, user_id: str, token: str) -> bool:
        return self._replace(user_id, refresh_token=token)

    def swap_refresh_token(self, user_id: str, expected: str, token: str) -> bool:
        if self.before_swap:
            self.before_swap(user_id)
        user = self.users.get(user_id)
        if not user or user.refresh_token != expected:
            return False
        return self._replace(user_id, refresh_token=token)

    def clear_refresh_token(self, user_id: str) -> bool:
        return self._replace(user_id, refresh_token=None)

    def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        return self._replace(user_id, password_hash=password_hash)

    def update_avatar(self, user_id: str, avatar: str) -> User | None:
        if not self._replace(user_id, avatar=avatar):
            return None
        return self.users[user_id]

    def _replace(self, user_id: str, **changes: object) -> bool:
        user = self.users.get(user_id)
        if not user:
            return False
        self.users[user_id] = replace(user, updated_at=datetime.now(UTC), **changes)
        return True


class InMemoryLikeRepository(LikeRepository):
    def __init__(self) -> None:
        self.likes: dict[tuple[str, str], Like] = {}
        self._ids = itertools.count(1)
        self.raise_duplicate_on_add = False
        self.fail_with: Exception | None = None

    def exists(self, liked_user_id: str, liked_by_user_id: str) -> bool:
        if self.fail_with:
            raise self.fail_with
        return (liked_user_id, liked_by_user_id) in self.likes

    def add(self, liked_user_id: str, liked_by_user_id: str) -> Like:
        key = (liked_user_id, liked_by_user_id)
        if self.raise_duplicate_on_add or key in self.likes:
            # A concurrent request won the insert.
            self.likes.setdefault(key, self._new(key))
            raise DuplicateLikeError()
        self.likes[key] = self._new(key)
        return self.likes[key]

    def remove(self, liked_user_id: str, liked_by_user_id: str) -> bool:
        return self.likes.pop((liked_user_id, liked_by_user_id), None) is not None

    def _new(self, key: tuple[str, str]) -> Like:
        return Like(
            id=next(self._ids),
            liked_user_id=key[0],
            liked_by_user_id=key[1],
            created_at=datetime.now(UTC),
        )


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class InMemoryAvatarStorage(AvatarStorage):
    def __init__(self) -> None:
        self.uploaded: list[Path] = []
        self.deleted: list[str] = []
        self.discarded: list[Path] = []
        self.fail_upload = False
        self.delete_error: OSError | None = None

    def upload(self, local_path: Path) -> StoredAvatar | None:
        if self.fail_upload:
            return None
        self.uploaded.append(local_path)
        return StoredAvatar(url=f"/static/avatars/{local_path.name}", key=local_path.name)

    def delete(self, url: str) -> bool:
        if self.delete_error:
            raise self.delete_error
        self.deleted.append(url)
        return True

    def discard(self, local_path: Path) -> None:
        self.discarded.append(local_path)


def make_codec(
    *,
    access_expiry: timedelta = timedelta(minutes=15),
    refresh_expiry: timedelta = timedelta(days=10),
) -> JwtTokenCodec:
    return JwtTokenCodec(
        access_secret="unit-access-secret-0123456789abcdef",
        access_expiry=access_expiry,
        refresh_secret="unit-refresh-secret-0123456789abcdef",
        refresh_expiry=refresh_expiry,
    )


def seed_user(
    users: InMemoryUserRepository,
    *,
    username: str = "alice",
    email: str = "alice@example.com",
    password: str = "secret123",
) -> User:
    return users.add(
        NewUser(
            username=username,
            email=email,
            full_name=username.title(),
            password_hash=DeterministicHasher().hash(password),
            avatar=f"/static/avatars/{username}.png",
        )
    )
