# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .likes.entities import Like, LikeState, ToggleResult
from .users.entities import NewUser, StoredAvatar, TokenClaims, TokenPair, TokenType, User

__all__ = [
    "Like",
    "LikeState",
    "NewUser",
    "StoredAvatar",
    "ToggleResult",
    "TokenClaims",
    "TokenPair",
    "TokenType",
    "User",
]
