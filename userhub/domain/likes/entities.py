# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(slots=True, frozen=True)
class Like:
    """Directed edge: ``liked_by_user_id`` likes ``liked_user_id``."""

    id: int
    liked_user_id: str
    liked_by_user_id: str
    created_at: datetime


class LikeState(str, Enum):
    LIKED = "liked"
    UNLIKED = "unliked"


@dataclass(slots=True, frozen=True)
class ToggleResult:
    state: LikeState
    like: Like | None = None
