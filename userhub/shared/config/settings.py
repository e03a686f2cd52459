# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_DEV_SECRETS = ("dev", "development", "test", "", "dev-access-secret", "dev-refresh-secret")


def _settings_config() -> SettingsConfigDict:
    return SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
    )


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///userhub.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _settings_config()


class TokenConfig(BaseSettings):
    access_secret: str = Field("dev-access-secret", alias="ACCESS_TOKEN_SECRET")
    access_expiry: timedelta = Field(timedelta(minutes=15), alias="ACCESS_TOKEN_EXPIRY")
    refresh_secret: str = Field("dev-refresh-secret", alias="REFRESH_TOKEN_SECRET")
    refresh_expiry: timedelta = Field(timedelta(days=10), alias="REFRESH_TOKEN_EXPIRY")
    algorithm: str = Field("HS256", alias="JWT_ALGORITHM")

    model_config = _settings_config()

    @model_validator(mode="after")
    def _check_lifetimes(self) -> "TokenConfig":
        if self.access_expiry >= self.refresh_expiry:
            raise ValueError("ACCESS_TOKEN_EXPIRY must be shorter than REFRESH_TOKEN_EXPIRY")
        return self


class SecurityConfig(BaseSettings):
    # Cookies are always HttpOnly + Secure; only SameSite is tunable.
    cookie_samesite: str = Field("Lax", alias="COOKIE_SAMESITE")

    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _settings_config()

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("enable_hsts", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)


class StorageConfig(BaseSettings):
    avatar_dir: Path = Field(Path("instance/avatars"), alias="AVATAR_DIR")
    avatar_base_url: str = Field("/static/avatars", alias="AVATAR_BASE_URL")
    upload_tmp_dir: Path = Field(Path("instance/tmp"), alias="UPLOAD_TMP_DIR")
    max_upload_bytes: int = Field(5 * 1024 * 1024, ge=1, alias="MAX_UPLOAD_BYTES")

    model_config = _settings_config()

    @field_validator("avatar_dir", "upload_tmp_dir", mode="after")
    @classmethod
    def _ensure_paths(cls, value: Any) -> Any:
        if isinstance(value, Path):
            value.mkdir(parents=True, exist_ok=True)
        return value

    @field_validator("avatar_base_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _token_config_factory() -> TokenConfig:
    return TokenConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


def _storage_config_factory() -> StorageConfig:
    return StorageConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    tokens: TokenConfig = Field(default_factory=_token_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)
    storage: StorageConfig = Field(default_factory=_storage_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        errors = []
        if self.tokens.access_secret in _DEV_SECRETS:
            errors.append("ACCESS_TOKEN_SECRET uses a development default")
        if self.tokens.refresh_secret in _DEV_SECRETS:
            errors.append("REFRESH_TOKEN_SECRET uses a development default")
        if self.tokens.access_secret == self.tokens.refresh_secret:
            errors.append("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must differ")
        if errors:
            raise ValueError("; ".join(errors))

        warnings = []
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "SecurityConfig",
    "StorageConfig",
    "TokenConfig",
    "load_config",
]
