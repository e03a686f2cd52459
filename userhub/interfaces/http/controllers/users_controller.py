# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from pathlib import Path

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from userhub.application.use_cases.users.change_password import ChangePasswordUseCase
from userhub.application.use_cases.users.get_user_profile import GetUserProfileUseCase
from userhub.application.use_cases.users.login_user import LoginUserUseCase
from userhub.application.use_cases.users.logout_user import LogoutUserUseCase
from userhub.application.use_cases.users.refresh_session import RefreshSessionUseCase
from userhub.application.use_cases.users.register_user import (
    RegisterUserCommand,
    RegisterUserUseCase,
)
from userhub.application.use_cases.users.update_avatar import UpdateAvatarUseCase
from userhub.auth import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    auth_required,
    authed_request,
)
from userhub.domain.users.entities import TokenPair
from userhub.infrastructure.audit import AuditAction, audit_log
from userhub.infrastructure.storage import safe_filename
from userhub.interfaces.http.dto.users import (
    ApiResponseDTO,
    ChangePasswordRequestDTO,
    LoginRequestDTO,
    RefreshRequestDTO,
    RegisterFormDTO,
    TokenPairDTO,
    UserPublicDTO,
)
from userhub.shared.config import load_config
from userhub.shared.errors import AppError
from userhub.shared.errors.validation import raise_validation_error
from userhub.shared.logging import logger


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def _request_fields() -> dict:
    """Body fields from a JSON payload, or from a url-encoded/multipart form."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def _save_upload(field: str) -> Path | None:
    """Spool the multipart file ``field`` into the upload temp dir."""
    upload = request.files.get(field)
    if upload is None or not upload.filename:
        return None
    tmp_dir = load_config().storage.upload_tmp_dir
    tmp_dir.mkdir(parents=True, exist_ok=True)
    path = tmp_dir / f"{uuid.uuid4().hex[:12]}-{safe_filename(upload.filename)}"
    upload.save(path)
    logger.debug(f"users.upload: spooled field={field} path={path}")
    return path


def _set_session_cookies(response: Response, pair: TokenPair) -> None:
    config = load_config()
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        pair.access_token,
        httponly=True,
        secure=True,
        samesite=config.security.cookie_samesite,
        max_age=int(config.tokens.access_expiry.total_seconds()),
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        pair.refresh_token,
        httponly=True,
        secure=True,
        samesite=config.security.cookie_samesite,
        max_age=int(config.tokens.refresh_expiry.total_seconds()),
    )


def _clear_session_cookies(response: Response) -> None:
    samesite = load_config().security.cookie_samesite
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(name, httponly=True, secure=True, samesite=samesite)


class UsersController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        refresh_use_case: RefreshSessionUseCase,
        logout_use_case: LogoutUserUseCase,
        change_password_use_case: ChangePasswordUseCase,
        update_avatar_use_case: UpdateAvatarUseCase,
        get_profile_use_case: GetUserProfileUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._refresh_use_case = refresh_use_case
        self._logout_use_case = logout_use_case
        self._change_password_use_case = change_password_use_case
        self._update_avatar_use_case = update_avatar_use_case
        self._get_profile_use_case = get_profile_use_case

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterFormDTO.model_validate(request.form.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._register_use_case.execute(
            RegisterUserCommand(
                username=dto.username,
                email=dto.email,
                full_name=dto.full_name,
                password=dto.password,
                avatar_path=_save_upload("avatar"),
                project_name=dto.project_name,
                project_url=dto.project_url,
            )
        )

        audit_log(
            AuditAction.REGISTER,
            user_id=user.id,
            ip_address=_get_client_ip(),
            details={"username": user.username},
        )

        payload = ApiResponseDTO.ok(
            UserPublicDTO.from_entity(user).to_json(), "User Registered Successfully!"
        )
        return jsonify(payload), 200

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(_request_fields())
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = _get_client_ip()
        try:
            result = self._login_use_case.execute(dto.username, dto.email, dto.password)
        except AppError as exc:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"username": dto.username, "email": dto.email, "error": exc.message},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=result.user.id,
            ip_address=ip_address,
            details={"username": result.user.username},
        )

        tokens = TokenPairDTO.from_entity(result.tokens).model_dump(by_alias=True)
        payload = ApiResponseDTO.ok(
            {"user": UserPublicDTO.from_entity(result.user).to_json(), **tokens},
            "User Logged In!",
        )
        response = jsonify(payload)
        _set_session_cookies(response, result.tokens)
        return response, 200

    @auth_required
    def logout(self) -> tuple[Response, int]:
        user_id = authed_request().user_id
        self._logout_use_case.execute(user_id)

        audit_log(AuditAction.LOGOUT, user_id=user_id, ip_address=_get_client_ip())

        response = jsonify(ApiResponseDTO.ok({}, "User Logged Out!"))
        _clear_session_cookies(response)
        return response, 200

    def refresh_token(self) -> tuple[Response, int]:
        try:
            dto = RefreshRequestDTO.model_validate(_request_fields())
        except ValidationError as exc:
            raise_validation_error(exc)

        presented = request.cookies.get(REFRESH_TOKEN_COOKIE) or dto.refresh_token
        try:
            pair = self._refresh_use_case.execute(presented)
        except AppError as exc:
            audit_log(
                AuditAction.TOKEN_REFRESH_REJECTED,
                ip_address=_get_client_ip(),
                details={"reason": exc.message},
                success=False,
            )
            raise

        audit_log(AuditAction.TOKEN_REFRESHED, ip_address=_get_client_ip())

        payload = ApiResponseDTO.ok(
            TokenPairDTO.from_entity(pair).model_dump(by_alias=True), "Access Token Refreshed!"
        )
        response = jsonify(payload)
        _set_session_cookies(response, pair)
        return response, 200

    @auth_required
    def change_password(self) -> tuple[Response, int]:
        try:
            dto = ChangePasswordRequestDTO.model_validate(_request_fields())
        except ValidationError as exc:
            raise_validation_error(exc)

        user_id = authed_request().user_id
        self._change_password_use_case.execute(user_id, dto.old_password, dto.new_password)

        audit_log(AuditAction.PASSWORD_CHANGED, user_id=user_id, ip_address=_get_client_ip())
        return jsonify(ApiResponseDTO.ok({}, "Password Changed Successfully!")), 200

    @auth_required
    def current_user(self) -> tuple[Response, int]:
        user = authed_request().user
        payload = ApiResponseDTO.ok(
            UserPublicDTO.from_entity(user).to_json(), "Current User Fetched Successfully!"
        )
        return jsonify(payload), 200

    @auth_required
    def update_avatar(self) -> tuple[Response, int]:
        user_id = authed_request().user_id
        user = self._update_avatar_use_case.execute(user_id, _save_upload("avatar"))

        audit_log(
            AuditAction.AVATAR_UPDATED,
            user_id=user_id,
            ip_address=_get_client_ip(),
            details={"avatar": user.avatar},
        )

        payload = ApiResponseDTO.ok(
            UserPublicDTO.from_entity(user).to_json(), "Avatar Image Updated Successfully!"
        )
        return jsonify(payload), 200

    @auth_required
    def user_profile(self, username: str) -> tuple[Response, int]:
        user = self._get_profile_use_case.execute(username)
        payload = ApiResponseDTO.ok(
            {"user": UserPublicDTO.from_entity(user).to_json()}, "User Profile Fetched"
        )
        return jsonify(payload), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("users", __name__, url_prefix="/api/v1/users")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/refresh-token", view_func=self.refresh_token, methods=["POST"])
        bp.add_url_rule("/change-password", view_func=self.change_password, methods=["POST"])
        bp.add_url_rule("/current-user", view_func=self.current_user, methods=["GET"])
        bp.add_url_rule("/update-avatar", view_func=self.update_avatar, methods=["PATCH"])
        bp.add_url_rule("/u/<username>", view_func=self.user_profile, methods=["GET"])
        return bp
