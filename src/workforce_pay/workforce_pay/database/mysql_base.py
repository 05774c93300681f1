from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, List, Optional

import mysql.connector

from ..core.exceptions import ReconciliationRequired
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

# Connection of the transaction opened by `MySQLTransactionManager.atomic()`, if any.
_active_conn: ContextVar[Optional[Any]] = ContextVar("workforce_pay_active_conn", default=None)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    active = _active_conn.get()
    if active is not None:
        # Inside atomic(): commit/rollback belong to the transaction owner.
        cur = active.cursor(dictionary=dictionary)
        try:
            yield active, cur
        finally:
            cur.close()
        return

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


class MySQLTransactionManager:
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def atomic(self) -> Iterator[None]:
        if _active_conn.get() is not None:
            yield
            return

        conn = self._conn_factory.connect()
        token = _active_conn.set(conn)
        try:
            yield
            conn.commit()
        except Exception as exc:
            try:
                conn.rollback()
            except mysql.connector.Error:
                logger.critical("Rollback failed after %r; records need reconciliation", exc, exc_info=True)
                raise ReconciliationRequired("Partial write could not be rolled back") from exc
            raise
        finally:
            _active_conn.reset(token)
            conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def load_json(value: Any, default: Any) -> Any:
    """Decode a JSON column across connector implementations (str, bytes or already decoded)."""

    if value is None:
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
        return json.loads(value)
    return value


def dump_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def as_bool(value: Any) -> bool:
    return bool(int(value)) if value is not None else False
