# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from userhub.application.services.password_hashing import WerkzeugPasswordHasher
from userhub.application.services.token_codec import JwtTokenCodec
from userhub.application.use_cases.likes.toggle_like import ToggleLikeUseCase
from userhub.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from userhub.application.use_cases.users.change_password import ChangePasswordUseCase
from userhub.application.use_cases.users.get_user_profile import GetUserProfileUseCase
from userhub.application.use_cases.users.login_user import LoginUserUseCase
from userhub.application.use_cases.users.logout_user import LogoutUserUseCase
from userhub.application.use_cases.users.refresh_session import RefreshSessionUseCase
from userhub.application.use_cases.users.register_user import RegisterUserUseCase
from userhub.application.use_cases.users.update_avatar import UpdateAvatarUseCase
from userhub.infrastructure.repositories.likes.sqlalchemy_like_repository import (
    SqlAlchemyLikeRepository,
)
from userhub.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from userhub.infrastructure.storage import LocalAvatarStorage
from userhub.interfaces.http.controllers.likes_controller import LikesController
from userhub.interfaces.http.controllers.users_controller import UsersController
from userhub.shared.config import load_config


class Container:
    def __init__(self) -> None:
        self._config = load_config()

    # Adapters

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def token_codec(self) -> JwtTokenCodec:
        return JwtTokenCodec.from_config(self._config.tokens)

    @cached_property
    def avatar_storage(self) -> LocalAvatarStorage:
        return LocalAvatarStorage(
            self._config.storage.avatar_dir, self._config.storage.avatar_base_url
        )

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository()

    @cached_property
    def like_repository(self) -> SqlAlchemyLikeRepository:
        return SqlAlchemyLikeRepository()

    # Use cases

    @cached_property
    def authenticate_user_use_case(self) -> AuthenticateUserUseCase:
        return AuthenticateUserUseCase(users=self.user_repository, tokens=self.token_codec)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            avatars=self.avatar_storage,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_codec,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def refresh_session_use_case(self) -> RefreshSessionUseCase:
        return RefreshSessionUseCase(users=self.user_repository, tokens=self.token_codec)

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(users=self.user_repository)

    @cached_property
    def change_password_use_case(self) -> ChangePasswordUseCase:
        return ChangePasswordUseCase(
            users=self.user_repository, password_hasher=self.password_hasher
        )

    @cached_property
    def update_avatar_use_case(self) -> UpdateAvatarUseCase:
        return UpdateAvatarUseCase(users=self.user_repository, avatars=self.avatar_storage)

    @cached_property
    def get_user_profile_use_case(self) -> GetUserProfileUseCase:
        return GetUserProfileUseCase(users=self.user_repository)

    @cached_property
    def toggle_like_use_case(self) -> ToggleLikeUseCase:
        return ToggleLikeUseCase(users=self.user_repository, likes=self.like_repository)

    # Controllers

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            refresh_use_case=self.refresh_session_use_case,
            logout_use_case=self.logout_user_use_case,
            change_password_use_case=self.change_password_use_case,
            update_avatar_use_case=self.update_avatar_use_case,
            get_profile_use_case=self.get_user_profile_use_case,
        )

    @cached_property
    def likes_controller(self) -> LikesController:
        return LikesController(toggle_use_case=self.toggle_like_use_case)


container = Container()
