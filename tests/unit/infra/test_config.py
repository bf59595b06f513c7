"""Tests for StoreConfig resolution.

Environment DB_* variables override explicit options; ports default to the
backend's standard port; expire comes from options only.
"""

from __future__ import annotations

import pytest

from src.infra.config import DEFAULT_DRIVER, StoreConfig, default_port
from src.shared.errors import ConfigError


@pytest.mark.unit
class TestDefaultPort:
    def test_postgresql(self) -> None:
        assert default_port("postgresql+asyncpg") == 5432

    def test_mysql(self) -> None:
        assert default_port("mysql+aiomysql") == 3306

    def test_sqlite_has_none(self) -> None:
        assert default_port("sqlite+aiosqlite") is None


@pytest.mark.unit
class TestResolve:
    def test_options_only(self) -> None:
        config = StoreConfig.resolve(
            {"host": "db", "user": "paste", "password": "pw", "database": "pastes", "expire": 3600},
            env={},
        )
        assert config.driver == DEFAULT_DRIVER
        assert config.host == "db"
        assert config.user == "paste"
        assert config.database == "pastes"
        assert config.port == 5432
        assert config.expire == 3600
        assert config.ttl == 3600

    def test_env_overrides_options(self) -> None:
        env = {
            "DB_HOST": "env-host",
            "DB_USER": "env-user",
            "DB_PASSWORD": "env-pw",
            "DB_NAME": "env-db",
            "DB_PORT": "6543",
        }
        config = StoreConfig.resolve(
            {"host": "opt-host", "user": "opt-user", "database": "opt-db", "port": 1},
            env=env,
        )
        assert config.host == "env-host"
        assert config.user == "env-user"
        assert config.password == "env-pw"
        assert config.database == "env-db"
        assert config.port == 6543

    def test_empty_env_value_does_not_override(self) -> None:
        config = StoreConfig.resolve({"host": "opt-host"}, env={"DB_HOST": ""})
        assert config.host == "opt-host"

    def test_env_driver_selects_default_port(self) -> None:
        config = StoreConfig.resolve({}, env={"DB_DRIVER": "mysql+aiomysql"})
        assert config.backend == "mysql"
        assert config.port == 3306

    def test_expire_ignores_environment(self) -> None:
        config = StoreConfig.resolve({}, env={"DB_EXPIRE": "10"})
        assert config.expire is None
        assert config.ttl == 0

    def test_string_expire_is_parsed(self) -> None:
        assert StoreConfig.resolve({"expire": "120"}, env={}).expire == 120

    def test_invalid_port_raises(self) -> None:
        with pytest.raises(ConfigError, match="port") as info:
            StoreConfig.resolve({}, env={"DB_PORT": "abc"})
        assert info.value.field == "port"

    def test_negative_expire_raises(self) -> None:
        with pytest.raises(ConfigError, match="expire"):
            StoreConfig.resolve({"expire": -5}, env={})


@pytest.mark.unit
class TestStoreConfig:
    def test_is_immutable(self) -> None:
        config = StoreConfig()
        with pytest.raises(AttributeError):
            config.host = "other"  # type: ignore[misc]

    def test_repr_masks_password(self) -> None:
        config = StoreConfig(password="hunter2")
        assert "hunter2" not in repr(config)
        assert "***" in repr(config)

    def test_url_for_server_backend(self) -> None:
        config = StoreConfig(
            driver="postgresql+asyncpg",
            host="db",
            user="u",
            password="p",
            database="entries",
            port=5432,
        )
        url = config.url
        assert url.drivername == "postgresql+asyncpg"
        assert url.host == "db"
        assert url.port == 5432
        assert url.database == "entries"
        assert url.password == "p"

    def test_url_for_sqlite(self) -> None:
        config = StoreConfig(driver="sqlite+aiosqlite", database="/tmp/entries.db", host="ignored")
        assert config.url.host is None
        assert config.url.database == "/tmp/entries.db"

    @pytest.mark.parametrize("database", [None, "", ":memory:"])
    def test_sqlite_without_file_raises(self, database: str | None) -> None:
        with pytest.raises(ConfigError) as info:
            StoreConfig(driver="sqlite+aiosqlite", database=database)
        assert info.value.field == "database"

    def test_sqlite_driver_from_env_needs_db_name(self) -> None:
        with pytest.raises(ConfigError, match="sqlite"):
            StoreConfig.resolve({"expire": 60}, env={"DB_DRIVER": "sqlite+aiosqlite"})

    def test_server_backend_without_database_is_allowed(self) -> None:
        assert StoreConfig(driver="postgresql+asyncpg").database is None
