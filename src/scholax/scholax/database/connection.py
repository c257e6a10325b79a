from __future__ import annotations

import logging
from dataclasses import dataclass

import mysql.connector

from ..core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "scholax_db")),
        )


class DatabaseConnection:
    """DB connection factory handed to every repository.

    Built once by the container and passed in explicitly. ``open()`` runs at
    application start and fails fast if MySQL is unreachable; ``close()`` runs
    at shutdown, after which no new connections are handed out.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._closed = False

    @property
    def config(self) -> DBConfig:
        return self._config

    def open(self) -> None:
        self._closed = False
        conn = self.connect()
        try:
            conn.ping(reconnect=False)
        finally:
            conn.close()
        logger.info(
            "Connected to MySQL %s@%s:%s/%s",
            self._config.user,
            self._config.host,
            self._config.port,
            self._config.database,
        )

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            logger.info("Database connection factory closed")

    def connect(self):
        if self._closed:
            raise StoreUnavailableError("Database connection has been closed")
        try:
            return mysql.connector.connect(
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
            )
        except mysql.connector.Error as e:
            logger.error("Database unavailable: %s", e)
            raise StoreUnavailableError("Database unavailable") from e
