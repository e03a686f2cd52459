from __future__ import annotations

from userhub.domain.users.entities import User
from userhub.domain.users.repositories import UserRepository
from userhub.shared.errors import NotFoundError


class GetUserProfileUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, username: str) -> User:
        user = self._users.find_by_username((username or "").strip().lower())
        if not user:
            raise NotFoundError("Invalid User")
        return user
