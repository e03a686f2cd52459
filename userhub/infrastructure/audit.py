# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import json
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from userhub.shared.logging import logger


class AuditAction(str, Enum):
    # Accounts
    REGISTER = "register"
    PASSWORD_CHANGED = "password_changed"
    AVATAR_UPDATED = "avatar_updated"

    # Sessions
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    TOKEN_REFRESHED = "token_refreshed"
    TOKEN_REFRESH_REJECTED = "token_refresh_rejected"

    # Likes
    LIKE_ADDED = "like_added"
    LIKE_REMOVED = "like_removed"


_SENSITIVE_KEYS = {"password", "token", "secret", "cookie", "authorization"}


class AuditLogger:
    @staticmethod
    def log(
        action: AuditAction,
        user_id: str | None = None,
        ip_address: str | None = None,
        details: dict[str, Any] | None = None,
        success: bool = True,
    ) -> None:
        timestamp = datetime.now(UTC)
        safe_details = _sanitize_details(details) if details else {}

        log_message = (
            f"AUDIT: {action.value} | "
            f"user_id={user_id} | "
            f"ip={ip_address} | "
            f"success={success}"
        )
        if safe_details:
            log_message += f" | details={safe_details}"

        if success:
            logger.info(log_message)
        else:
            logger.warning(log_message)

        _store_audit_log(
            timestamp=timestamp,
            action=action.value,
            user_id=user_id,
            ip_address=ip_address,
            success=success,
            details=safe_details,
        )


def _sanitize_details(details: dict[str, Any]) -> dict[str, Any]:
    sanitized = {}
    for key, value in details.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS):
            sanitized[key] = "***REDACTED***"
        else:
            sanitized[key] = value
    return sanitized


def _store_audit_log(
    timestamp: datetime,
    action: str,
    user_id: str | None,
    ip_address: str | None,
    success: bool,
    details: dict[str, Any],
) -> None:
    from userhub.infrastructure.db.models import AuditLog
    from userhub.infrastructure.db.session import session_scope

    # Audit rows are best effort; a failed insert never fails the request.
    try:
        with session_scope() as session:
            session.add(
                AuditLog(
                    timestamp=timestamp,
                    action=action,
                    user_id=user_id,
                    ip_address=ip_address,
                    success=success,
                    details_json=json.dumps(details, default=str) if details else None,
                )
            )
    except SQLAlchemyError as db_error:
        logger.warning(f"Failed to store audit log in database: {db_error}")


audit = AuditLogger()


def audit_log(
    action: AuditAction,
    user_id: str | None = None,
    ip_address: str | None = None,
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> None:
    audit.log(action, user_id, ip_address, details, success)


__all__ = [
    "AuditAction",
    "AuditLogger",
    "audit",
    "audit_log",
]
