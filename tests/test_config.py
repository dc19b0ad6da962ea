"""Settings — environment names, defaults, and database URL resolution."""

import pytest

from users_api.config import Settings

ENV_VARS = (
    "DATABASE_URL", "DB_USER", "DB_PASSWORD", "DB_HOST", "DB_PORT", "DB_NAME",
    "PORT", "NODE_ENV", "ENVIRONMENT", "HOSTNAME", "DB_POOL_MAX",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings(_env_file=None)

    assert settings.port == 3000
    assert settings.host == "0.0.0.0"
    assert settings.db_port == 5432
    assert settings.db_pool_max == 10
    assert settings.db_idle_timeout == 30
    assert settings.db_connect_timeout == 2
    assert settings.environment == "development"
    assert settings.hostname == "unknown"
    assert settings.cors_origins == ["*"]


def test_url_built_from_parts(clean_env):
    clean_env.setenv("DB_USER", "svc")
    clean_env.setenv("DB_PASSWORD", "p@ss")
    clean_env.setenv("DB_HOST", "db.internal")
    clean_env.setenv("DB_PORT", "6543")
    clean_env.setenv("DB_NAME", "people")

    url = Settings(_env_file=None).database_url

    assert url.startswith("postgresql+asyncpg://svc:")
    assert "@db.internal:6543/people" in url
    assert "p%40ss" in url


def test_database_url_overrides_parts(clean_env):
    clean_env.setenv("DATABASE_URL", "postgresql://u:p@h:5432/d")
    clean_env.setenv("DB_HOST", "ignored")

    assert Settings(_env_file=None).database_url == (
        "postgresql+asyncpg://u:p@h:5432/d"
    )


def test_node_env_alias(clean_env):
    clean_env.setenv("NODE_ENV", "production")

    assert Settings(_env_file=None).environment == "production"


def test_hostname_and_port_from_env(clean_env):
    clean_env.setenv("HOSTNAME", "api-0")
    clean_env.setenv("PORT", "8080")

    settings = Settings(_env_file=None)

    assert settings.hostname == "api-0"
    assert settings.port == 8080


def test_pool_max_must_be_positive(clean_env):
    clean_env.setenv("DB_POOL_MAX", "0")

    with pytest.raises(ValueError):
        Settings(_env_file=None)
