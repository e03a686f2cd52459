# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import Like


class LikeRepository(Protocol):
    def exists(self, liked_user_id: str, liked_by_user_id: str) -> bool: ...

    def add(self, liked_user_id: str, liked_by_user_id: str) -> Like:
        """Insert the edge; raises ``DuplicateLikeError`` if the pair exists."""
        ...

    def remove(self, liked_user_id: str, liked_by_user_id: str) -> bool: ...
