# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from userhub.domain.users.exceptions import InvalidCredentialsError, UserNotFoundError
from userhub.domain.users.repositories import PasswordHasher, UserRepository
from userhub.shared.errors import InternalError, ValidationError
from userhub.shared.logging import logger


class ChangePasswordUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, user_id: str, old_password: str | None, new_password: str | None) -> None:
        missing = [
            name
            for name, value in (("oldPassword", old_password), ("newPassword", new_password))
            if not value
        ]
        if missing:
            raise ValidationError(
                ", ".join(f"{name} is required" for name in missing),
                context={"fields": missing},
            )

        user = self._users.find_by_id(user_id)
        if not user:
            raise UserNotFoundError()

        if not self._password_hasher.verify(old_password, user.password_hash):
            raise InvalidCredentialsError("Invalid Password")

        # Only the hash column is written; no other user fields are touched.
        if not self._users.update_password_hash(user.id, self._password_hasher.hash(new_password)):
            raise InternalError("Failed to update password for the user")

        logger.info(f"auth.change_password: ok user_id={user.id}")
