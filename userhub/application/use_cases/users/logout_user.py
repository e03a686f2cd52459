"""Use-case for revoking the stored refresh token."""

from __future__ import annotations

from userhub.domain.users.repositories import UserRepository
from userhub.shared.errors import InternalError
from userhub.shared.logging import logger


class LogoutUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str) -> None:
        if not self._users.clear_refresh_token(user_id):
            raise InternalError("Failed to update refreshToken for the user")
        logger.info(f"auth.logout: ok user_id={user_id}")
