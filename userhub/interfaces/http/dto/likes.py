from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from userhub.domain.likes.entities import Like, ToggleResult


class LikeDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    liked_user_id: str = Field(alias="likedUserId")
    liked_by_user_id: str = Field(alias="likedByUserId")
    created_at: datetime = Field(alias="createdAt")

    @classmethod
    def from_entity(cls, like: Like) -> "LikeDTO":
        return cls(
            id=like.id,
            liked_user_id=like.liked_user_id,
            liked_by_user_id=like.liked_by_user_id,
            created_at=like.created_at,
        )


def toggle_result_to_json(result: ToggleResult) -> dict[str, Any]:
    like = None
    if result.like:
        like = LikeDTO.from_entity(result.like).model_dump(by_alias=True, mode="json")
    return {"state": result.state.value, "response": like}
