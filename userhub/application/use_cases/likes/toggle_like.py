# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Toggle a directed like edge between two users.

The check and the write are separate statements; the storage layer's unique
constraint on the pair is what keeps the edge single. An insert rejected by
that constraint means a concurrent request already created the edge, which
is reported as ``liked``.
"""

from __future__ import annotations

import uuid

from userhub.domain.likes.entities import LikeState, ToggleResult
from userhub.domain.likes.exceptions import DuplicateLikeError
from userhub.domain.likes.repositories import LikeRepository
from userhub.domain.users.repositories import UserRepository
from userhub.shared.errors import AppError, InternalError, NotFoundError, ValidationError
from userhub.shared.logging import logger


def normalize_user_id(value: str | None) -> str | None:
    """Return the stored (dashed, lower-case) form of a UUID id, or None if malformed."""
    if not value:
        return None
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        return None


class ToggleLikeUseCase:
    def __init__(self, *, users: UserRepository, likes: LikeRepository) -> None:
        self._users = users
        self._likes = likes

    def execute(self, liked_user_id: str, liked_by_user_id: str) -> ToggleResult:
        liked_user_id = normalize_user_id(liked_user_id)
        if not liked_user_id:
            raise ValidationError("Invalid Liked User Id")
        liked_by_user_id = normalize_user_id(liked_by_user_id)
        if not liked_by_user_id:
            raise ValidationError("Invalid User Id")

        if not self._users.find_by_id(liked_user_id):
            raise NotFoundError("No User Found")

        try:
            if self._likes.exists(liked_user_id, liked_by_user_id):
                self._likes.remove(liked_user_id, liked_by_user_id)
                result = ToggleResult(state=LikeState.UNLIKED)
            else:
                try:
                    like = self._likes.add(liked_user_id, liked_by_user_id)
                except DuplicateLikeError:
                    logger.info(
                        f"likes.toggle: concurrent insert, already liked "
                        f"liked_user_id={liked_user_id} liked_by={liked_by_user_id}"
                    )
                    result = ToggleResult(state=LikeState.LIKED)
                else:
                    result = ToggleResult(state=LikeState.LIKED, like=like)
        except AppError:
            raise
        except Exception as exc:
            logger.exception(
                f"likes.toggle: err liked_user_id={liked_user_id} liked_by={liked_by_user_id}"
            )
            raise InternalError("Internal server error in toggleUserLike") from exc

        logger.info(
            f"likes.toggle: {result.state.value} liked_user_id={liked_user_id} "
            f"liked_by={liked_by_user_id}"
        )
        return result
