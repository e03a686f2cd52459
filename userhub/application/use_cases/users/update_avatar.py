# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pathlib import Path

from userhub.domain.users.entities import User
from userhub.domain.users.exceptions import UserNotFoundError
from userhub.domain.users.repositories import AvatarStorage, UserRepository
from userhub.shared.errors import ValidationError
from userhub.shared.logging import logger


class UpdateAvatarUseCase:
    def __init__(self, *, users: UserRepository, avatars: AvatarStorage) -> None:
        self._users = users
        self._avatars = avatars

    def execute(self, user_id: str, avatar_path: Path | None) -> User:
        if not avatar_path:
            raise ValidationError("Avatar File Is Missing")

        current = self._users.find_by_id(user_id)
        if not current:
            self._avatars.discard(avatar_path)
            raise UserNotFoundError()

        avatar = self._avatars.upload(avatar_path)
        if not avatar:
            raise ValidationError("Error While Uploading Avatar")

        updated = self._users.update_avatar(user_id, avatar.url)
        if not updated:
            self._avatars.delete(avatar.url)
            raise UserNotFoundError()

        if current.avatar and current.avatar != avatar.url:
            try:
                self._avatars.delete(current.avatar)
            except OSError:
                logger.warning(
                    f"users.update_avatar: old avatar not deleted user_id={user_id} "
                    f"url={current.avatar}"
                )

        logger.info(f"users.update_avatar: ok user_id={user_id}")
        return updated
