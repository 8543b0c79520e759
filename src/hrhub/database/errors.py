from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import mysql.connector

from ..core.constants import MYSQL_DEADLOCK, MYSQL_LOCK_WAIT_TIMEOUT
from ..core.exceptions import ConcurrencyConflictError

logger = logging.getLogger(__name__)

CONFLICT_ERRNOS = frozenset({MYSQL_DEADLOCK, MYSQL_LOCK_WAIT_TIMEOUT})


@contextmanager
def translate_driver_errors() -> Iterator[None]:
    """Re-raise lock conflicts as ConcurrencyConflictError.

    Every other driver error propagates unmodified.
    """
    try:
        yield
    except mysql.connector.Error as e:
        if getattr(e, "errno", None) in CONFLICT_ERRNOS:
            logger.warning("Concurrent write conflict (errno=%s): %s", e.errno, e.msg)
            raise ConcurrencyConflictError(str(e)) from e
        raise
