"""Document store configuration.

Resolved once at construction and immutable afterwards. Connection
parameters may be supplied explicitly; DB_* environment variables take
precedence over supplied values when set.

Environment:
    DB_DRIVER    SQLAlchemy async driver (default postgresql+asyncpg)
    DB_HOST      engine host
    DB_PORT      engine port (default: the driver's standard port)
    DB_USER      login user
    DB_PASSWORD  login password
    DB_NAME      database name (a file path for sqlite)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa

from src.shared.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_DRIVER = "postgresql+asyncpg"

_DEFAULT_PORTS = {
    "postgresql": 5432,
    "mysql": 3306,
    "mariadb": 3306,
}

_ENV_KEYS = {
    "driver": "DB_DRIVER",
    "host": "DB_HOST",
    "user": "DB_USER",
    "password": "DB_PASSWORD",
    "database": "DB_NAME",
    "port": "DB_PORT",
}


def default_port(driver: str) -> int | None:
    """Standard port for the driver's backend, None for file-based engines."""
    backend = driver.split("+", 1)[0]
    return _DEFAULT_PORTS.get(backend)


@dataclass(frozen=True)
class StoreConfig:
    """Immutable connection + TTL configuration for a document store.

    `expire` is the default TTL in seconds; None (or 0) means entries
    never expire by default.
    """

    driver: str = DEFAULT_DRIVER
    host: str | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    port: int | None = None
    expire: int | None = None

    def __post_init__(self) -> None:
        if self.expire is not None and self.expire < 0:
            msg = f"expire must be a non-negative number of seconds, got {self.expire}"
            raise ConfigError(msg, field="expire")
        # NullPool gives every connection a fresh in-memory database
        if self.backend == "sqlite" and self.database in (None, "", ":memory:"):
            msg = "sqlite needs a database file path (DB_NAME); in-memory databases are not shared"
            raise ConfigError(msg, field="database")

    def __repr__(self) -> str:
        password = "***" if self.password else None
        return (
            f"StoreConfig(driver={self.driver!r}, host={self.host!r}, user={self.user!r}, "
            f"password={password!r}, database={self.database!r}, port={self.port!r}, "
            f"expire={self.expire!r})"
        )

    @property
    def ttl(self) -> int:
        """Default TTL in seconds, 0 when entries never expire by default."""
        return self.expire or 0

    @property
    def backend(self) -> str:
        return self.driver.split("+", 1)[0]

    @property
    def url(self) -> sa.engine.URL:
        """SQLAlchemy URL for the configured engine."""
        if self.backend == "sqlite":
            return sa.engine.URL.create(self.driver, database=self.database)
        return sa.engine.URL.create(
            self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    @classmethod
    def resolve(
        cls,
        options: Mapping[str, Any] | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> StoreConfig:
        """Build a config from explicit options with environment overrides.

        Args:
            options: Explicit values (driver, host, user, password,
                database, port, expire).
            env: Environment mapping (defaults to os.environ).

        Raises:
            ConfigError: If the port or expire values are invalid, or sqlite
                has no database file.
        """
        options = dict(options or {})
        env = os.environ if env is None else env

        values: dict[str, Any] = {}
        for name, env_key in _ENV_KEYS.items():
            override = env.get(env_key)
            values[name] = override if override else options.get(name)

        driver = values["driver"] or DEFAULT_DRIVER
        port = _as_int(values["port"], "port")
        if port is None:
            port = default_port(driver)

        return cls(
            driver=driver,
            host=values["host"],
            user=values["user"],
            password=values["password"],
            database=values["database"],
            port=port,
            expire=_as_int(options.get("expire"), "expire"),
        )


def _as_int(raw: Any, field: str) -> int | None:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        msg = f"{field} must be an integer, got {raw!r}"
        raise ConfigError(msg, field=field) from None
