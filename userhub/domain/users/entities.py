# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(slots=True, frozen=True)
class User:

    id: str
    username: str
    email: str
    full_name: str
    password_hash: str
    avatar: str
    created_at: datetime
    updated_at: datetime
    refresh_token: str | None = None
    project_name: str | None = None
    project_url: str | None = None


@dataclass(slots=True, frozen=True)
class NewUser:
    """Fields required to create a user; the password is already hashed."""

    username: str
    email: str
    full_name: str
    password_hash: str
    avatar: str
    project_name: str | None = None
    project_url: str | None = None


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(slots=True, frozen=True)
class TokenClaims:
    subject: str
    token_type: TokenType
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(slots=True, frozen=True)
class StoredAvatar:
    url: str
    key: str
