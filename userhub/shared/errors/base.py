# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True)
class AppError(Exception):
    message: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": int(self.status),
            "message": self.message,
            "success": False,
            "data": None,
        }
        if self.context:
            payload["errors"] = dict(self.context)
        return payload


class DomainError(AppError):
    """Error whose message and status are declared on the subclass."""

    def __init__(
        self,
        message: str | None = None,
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_message = message or cast(str, getattr(self, "default_message", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(self, "default_status", HTTPStatus.BAD_REQUEST)
        )
        super().__init__(message=resolved_message, status=resolved_status, context=context)


class ValidationError(AppError):
    def __init__(
        self,
        message: str = "Validation failed",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, status=HTTPStatus.BAD_REQUEST, context=context)


class UnauthorizedError(AppError):
    def __init__(
        self,
        message: str = "Unauthorized Request",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, status=HTTPStatus.UNAUTHORIZED, context=context)


class NotFoundError(AppError):
    def __init__(
        self,
        message: str = "Not Found",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, status=HTTPStatus.NOT_FOUND, context=context)


class ConflictError(AppError):
    def __init__(
        self,
        message: str = "Conflict",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, status=HTTPStatus.CONFLICT, context=context)


class InternalError(AppError):
    def __init__(
        self,
        message: str = "Internal Server Error",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message, status=HTTPStatus.INTERNAL_SERVER_ERROR, context=context
        )


class UploadError(InternalError):
    def __init__(
        self,
        message: str = "Something went wrong while uploading Avatar file. Please try again.",
    ) -> None:
        super().__init__(message)
