from __future__ import annotations

import pytest

from reeverb.core.config import DEV_JWT_SECRET, load_settings


def test_defaults_when_environment_is_empty():
    settings = load_settings({})
    assert settings.app_env == "dev"
    assert settings.database_url == "sqlite:///./reeverb.db"
    assert settings.jwt_secret == DEV_JWT_SECRET
    assert settings.token_ttl_seconds == 86400
    assert settings.create_tables_on_start is True
    assert settings.cors_origins == ()


def test_reads_and_normalizes_values():
    settings = load_settings(
        {
            "APP_ENV": "Staging",
            "DATABASE_URL": " postgresql://db/reeverb ",
            "JWT_SECRET": "s3cret",
            "TOKEN_TTL_SECONDS": "7200",
            "CORS_ORIGINS": "https://a.test/, https://b.test",
            "LOG_LEVEL": "debug",
            "CREATE_TABLES_ON_START": "no",
        }
    )
    assert settings.app_env == "staging"
    assert settings.database_url == "postgresql://db/reeverb"
    assert settings.jwt_secret == "s3cret"
    assert settings.token_ttl_seconds == 7200
    assert settings.cors_origins == ("https://a.test", "https://b.test")
    assert settings.log_level == "DEBUG"
    assert settings.create_tables_on_start is False


def test_malformed_ttl_falls_back_to_default():
    assert load_settings({"TOKEN_TTL_SECONDS": "soon"}).token_ttl_seconds == 86400


def test_prod_requires_a_jwt_secret():
    with pytest.raises(RuntimeError):
        load_settings({"APP_ENV": "prod"})
    assert load_settings({"APP_ENV": "prod", "JWT_SECRET": "x"}).is_prod


def test_settings_are_immutable():
    settings = load_settings({})
    with pytest.raises(AttributeError):
        settings.jwt_secret = "other"  # type: ignore[misc]
