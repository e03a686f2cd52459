# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from userhub.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    default_message = "User already exists"
    default_status = HTTPStatus.CONFLICT


class UserNotFoundError(DomainError):
    default_message = "User does not exist"
    default_status = HTTPStatus.NOT_FOUND


class InvalidCredentialsError(DomainError):
    default_message = "Incorrect Password"
    default_status = HTTPStatus.UNAUTHORIZED


class InvalidTokenError(DomainError):
    default_message = "Invalid Token"
    default_status = HTTPStatus.UNAUTHORIZED


class TokenExpiredError(InvalidTokenError):
    default_message = "Token Expired"


class RefreshTokenReusedError(DomainError):
    default_message = "Refresh Token Is Expired or Used"
    default_status = HTTPStatus.UNAUTHORIZED
