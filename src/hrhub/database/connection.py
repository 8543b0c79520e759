from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Protocol

import mysql.connector

from .errors import translate_driver_errors

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class UnitOfWork(Protocol):
    """Groups several repository calls into one atomic unit."""

    def transaction(self, *, isolation_level: Optional[str] = None):
        raise NotImplementedError


class DatabaseConnection(UnitOfWork):
    """Singleton-like DB connection factory.

    Note: Outside ``transaction()`` we create short-lived connections per
    operation. Inside it, every ``db_cursor`` on this factory reuses the
    transaction's connection and the commit happens once at the end.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._active: ContextVar[Any] = ContextVar(f"hrhub_tx_{id(self)}", default=None)

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )

    def active_connection(self):
        return self._active.get()

    @contextmanager
    def transaction(self, *, isolation_level: Optional[str] = None) -> Iterator[Any]:
        outer = self._active.get()
        if outer is not None:
            # Nested units join the outer transaction.
            yield outer
            return

        conn = self.connect()
        token = self._active.set(conn)
        try:
            with translate_driver_errors():
                conn.start_transaction(isolation_level=isolation_level)
                yield conn
                conn.commit()
        except Exception:
            logger.debug("Rolling back transaction", exc_info=True)
            rollback_quietly(conn)
            raise
        finally:
            self._active.reset(token)
            conn.close()


def rollback_quietly(conn) -> None:
    # The caller re-raises the error that triggered the rollback.
    try:
        conn.rollback()
    except mysql.connector.Error:
        logger.warning("Rollback failed", exc_info=True)
