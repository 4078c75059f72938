from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    """Connection parameters for the timetrack MySQL database."""

    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = 10

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host") or "localhost"),
            port=int(db_config.get("port") or 3306),
            user=str(db_config.get("user") or "root"),
            password=str(db_config.get("password") or ""),
            database=str(db_config.get("database") or "timetrack_db"),
            connect_timeout=int(db_config.get("connect_timeout") or 10),
        )

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Opens one MySQL connection per repository call.

    Sessions are pinned to UTC so DATETIME columns round-trip as the naive
    UTC timestamps the services work with.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        current = cls._instance
        if current is None or current.config != config:
            current = cls._instance = cls(config)
        return current

    def connect(self, *, with_database: bool = True):
        params = dict(
            host=self._config.host,
            port=self._config.port,
            user=self._config.user,
            password=self._config.password,
            connection_timeout=self._config.connect_timeout,
            charset="utf8mb4",
            time_zone="+00:00",
        )
        if with_database:
            params["database"] = self._config.database
        return mysql.connector.connect(**params)
