from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from userhub.shared.config.settings import AppConfig, SecurityConfig, StorageConfig, TokenConfig


@pytest.fixture()
def production_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://app.example.com")
    monkeypatch.setenv("ENABLE_HSTS", "true")
    return monkeypatch


def test_production_rejects_default_secrets(production_env) -> None:
    production_env.setenv("ACCESS_TOKEN_SECRET", "dev-access-secret")
    production_env.setenv("REFRESH_TOKEN_SECRET", "dev-refresh-secret")

    with pytest.raises(ValidationError) as exc_info:
        AppConfig()

    assert "development default" in str(exc_info.value)


def test_production_rejects_shared_secret(production_env) -> None:
    production_env.setenv("ACCESS_TOKEN_SECRET", "a-long-random-shared-secret-value")
    production_env.setenv("REFRESH_TOKEN_SECRET", "a-long-random-shared-secret-value")

    with pytest.raises(ValidationError) as exc_info:
        AppConfig()

    assert "must differ" in str(exc_info.value)


def test_production_accepts_distinct_secrets(production_env) -> None:
    production_env.setenv("ACCESS_TOKEN_SECRET", "access-0f9e8d7c6b5a4f3e2d1c0b9a8f7e6d5c")
    production_env.setenv("REFRESH_TOKEN_SECRET", "refresh-1a2b3c4d5e6f7a8b9c0d1e2f3a4b5c6d")

    config = AppConfig()

    assert config.is_production()
    assert config.security.allowed_origins == ["https://app.example.com"]
    assert config.security.enable_hsts is True


def test_token_lifetimes_must_be_ordered(monkeypatch) -> None:
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRY", "P1D")
    monkeypatch.setenv("REFRESH_TOKEN_EXPIRY", "PT1H")

    with pytest.raises(ValidationError):
        TokenConfig()


def test_token_lifetimes_from_env(monkeypatch) -> None:
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRY", "PT10M")
    monkeypatch.setenv("REFRESH_TOKEN_EXPIRY", "P7D")

    config = TokenConfig()

    assert config.access_expiry == timedelta(minutes=10)
    assert config.refresh_expiry == timedelta(days=7)


def test_origins_split_on_commas(monkeypatch) -> None:
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example.com, https://b.example.com")

    assert SecurityConfig().allowed_origins == ["https://a.example.com", "https://b.example.com"]


def test_storage_creates_directories(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("AVATAR_DIR", str(tmp_path / "avatars"))
    monkeypatch.setenv("UPLOAD_TMP_DIR", str(tmp_path / "spool"))
    monkeypatch.setenv("AVATAR_BASE_URL", "https://cdn.example.com/avatars/")

    config = StorageConfig()

    assert (tmp_path / "avatars").is_dir()
    assert (tmp_path / "spool").is_dir()
    assert config.avatar_base_url == "https://cdn.example.com/avatars"
