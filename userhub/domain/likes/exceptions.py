# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from userhub.shared.errors.base import DomainError


class DuplicateLikeError(DomainError):
    default_message = "Like already exists"
    default_status = HTTPStatus.CONFLICT
