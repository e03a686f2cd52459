from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from userhub.domain.users.entities import TokenPair, User


class _StrippedModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class LoginRequestDTO(_StrippedModel):
    # Presence rules live in the use case so the error messages stay stable.
    username: str | None = Field(default=None, max_length=64)
    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)


class RefreshRequestDTO(_StrippedModel):
    refresh_token: str | None = Field(default=None, alias="refreshToken")


class ChangePasswordRequestDTO(_StrippedModel):
    old_password: str | None = Field(default=None, alias="oldPassword", max_length=128)
    new_password: str | None = Field(default=None, alias="newPassword", max_length=128)


class RegisterFormDTO(_StrippedModel):
    username: str | None = Field(default=None, max_length=64)
    email: str | None = Field(default=None, max_length=255)
    full_name: str | None = Field(default=None, alias="fullName", max_length=128)
    password: str | None = Field(default=None, max_length=128)
    project_name: str | None = Field(default=None, alias="projectName", max_length=128)
    project_url: str | None = Field(default=None, alias="projectUrl", max_length=512)

    @field_validator("username")
    @classmethod
    def _lower_username(cls, value: str | None) -> str | None:
        return value.lower() if value else value


class UserPublicDTO(BaseModel):
    """User record as exposed over HTTP; never carries secrets."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    email: str
    full_name: str = Field(alias="fullName")
    avatar: str
    project_name: str | None = Field(default=None, alias="projectName")
    project_url: str | None = Field(default=None, alias="projectUrl")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_entity(cls, user: User) -> "UserPublicDTO":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            avatar=user.avatar,
            project_name=user.project_name,
            project_url=user.project_url,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class TokenPairDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")

    @classmethod
    def from_entity(cls, pair: TokenPair) -> "TokenPairDTO":
        return cls(access_token=pair.access_token, refresh_token=pair.refresh_token)


class ApiResponseDTO(BaseModel):
    status: int
    data: Any = None
    message: str
    success: bool = True

    @classmethod
    def ok(cls, data: Any, message: str, status: int = 200) -> dict[str, Any]:
        return cls(status=status, data=data, message=message).model_dump(mode="json")
