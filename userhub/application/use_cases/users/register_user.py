# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from userhub.domain.users.entities import NewUser, User
from userhub.domain.users.exceptions import UserAlreadyExistsError
from userhub.domain.users.repositories import AvatarStorage, PasswordHasher, UserRepository
from userhub.shared.errors import InternalError, UploadError, ValidationError
from userhub.shared.logging import logger

_REQUIRED_FIELDS = ("username", "email", "fullName", "password")


@dataclass(slots=True, frozen=True)
class RegisterUserCommand:
    username: str | None
    email: str | None
    full_name: str | None
    password: str | None
    avatar_path: Path | None = None
    project_name: str | None = None
    project_url: str | None = None


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        avatars: AvatarStorage,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._avatars = avatars

    def execute(self, command: RegisterUserCommand) -> User:
        values = {
            "username": command.username,
            "email": command.email,
            "fullName": command.full_name,
            "password": command.password,
        }
        missing = [field for field in _REQUIRED_FIELDS if not (values[field] or "").strip()]
        if missing:
            if command.avatar_path:
                self._avatars.discard(command.avatar_path)
            raise ValidationError(
                ", ".join(f"{field} is required" for field in missing),
                context={"fields": missing},
            )

        username = command.username.strip().lower()
        email = command.email.strip()

        if self._users.find_by_username_or_email(username, email):
            if command.avatar_path:
                self._avatars.discard(command.avatar_path)
            logger.info(f"users.register: conflict username={username}")
            raise UserAlreadyExistsError()

        if not command.avatar_path:
            raise ValidationError("Avatar File Is Required")

        avatar = self._avatars.upload(command.avatar_path)
        if not avatar:
            raise UploadError()

        try:
            created = self._users.add(
                NewUser(
                    username=username,
                    email=email,
                    full_name=command.full_name.strip(),
                    password_hash=self._password_hasher.hash(command.password),
                    avatar=avatar.url,
                    project_name=command.project_name,
                    project_url=command.project_url,
                )
            )
        except UserAlreadyExistsError:
            # lost an insert race; the stored avatar has no owner
            logger.info(f"users.register: conflict on insert username={username}")
            self._avatars.delete(avatar.url)
            raise

        user = self._users.find_by_id(created.id)
        if not user:
            raise InternalError("Something went wrong while user registration")

        logger.info(f"users.register: ok user_id={user.id}")
        return user
