from __future__ import annotations

import mysql.connector
import pytest

from hrhub.core.constants import MYSQL_DEADLOCK, MYSQL_LOCK_WAIT_TIMEOUT
from hrhub.core.exceptions import ConcurrencyConflictError
from hrhub.database.connection import DatabaseConnection, DBConfig
from hrhub.database.errors import translate_driver_errors
from hrhub.database.mysql_base import db_cursor


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.closed = False

    def execute(self, sql, params=None):
        self.conn.executed.append(sql)
        if self.conn.fail_with is not None:
            raise self.conn.fail_with

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self):
        self.executed = []
        self.isolation_level = None
        self.commits = 0
        self.rollbacks = 0
        self.closed = False
        self.fail_with = None
        self.fail_rollback_with = None

    def start_transaction(self, isolation_level=None):
        self.isolation_level = isolation_level

    def cursor(self, dictionary=False):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1
        if self.fail_rollback_with is not None:
            raise self.fail_rollback_with

    def close(self):
        self.closed = True


@pytest.fixture
def db(monkeypatch):
    factory = DatabaseConnection(DBConfig(host="localhost", port=3306, user="u", password="p", database="hrhub_test"))
    opened = []

    def connect():
        conn = FakeConnection()
        opened.append(conn)
        return conn

    monkeypatch.setattr(factory, "connect", connect)
    factory.opened = opened
    return factory


def driver_error(errno):
    return mysql.connector.errors.DatabaseError(msg="boom", errno=errno)


@pytest.mark.parametrize("errno", [MYSQL_DEADLOCK, MYSQL_LOCK_WAIT_TIMEOUT])
def test_lock_conflicts_are_translated(errno):
    with pytest.raises(ConcurrencyConflictError):
        with translate_driver_errors():
            raise driver_error(errno)


def test_other_driver_errors_propagate_unmodified():
    err = driver_error(1146)

    with pytest.raises(mysql.connector.Error) as info:
        with translate_driver_errors():
            raise err

    assert info.value is err


def test_cursors_inside_a_transaction_share_one_connection(db):
    with db.transaction(isolation_level="SERIALIZABLE") as conn:
        with db_cursor(db) as (c1, cur):
            cur.execute("SELECT 1")
        with db_cursor(db) as (c2, cur):
            cur.execute("SELECT 2")

    assert c1 is c2 is conn
    assert len(db.opened) == 1
    assert conn.isolation_level == "SERIALIZABLE"
    assert conn.commits == 1
    assert conn.rollbacks == 0
    assert conn.closed
    assert db.active_connection() is None


def test_transaction_rolls_back_and_reraises(db):
    with pytest.raises(RuntimeError):
        with db.transaction():
            with db_cursor(db) as (_, cur):
                cur.execute("INSERT INTO promotions VALUES (1)")
            raise RuntimeError("designation update failed")

    conn = db.opened[0]
    assert conn.commits == 0
    assert conn.rollbacks == 1
    assert conn.closed
    assert db.active_connection() is None


def test_deadlock_inside_transaction_becomes_conflict(db):
    with pytest.raises(ConcurrencyConflictError):
        with db.transaction():
            with db_cursor(db) as (conn, cur):
                conn.fail_with = driver_error(MYSQL_DEADLOCK)
                cur.execute("UPDATE leaves SET status='Approved'")

    assert db.opened[0].rollbacks == 1


def test_nested_transaction_joins_outer(db):
    with db.transaction() as outer:
        with db.transaction() as inner:
            assert inner is outer

    assert len(db.opened) == 1
    assert outer.commits == 1


def test_cursor_outside_transaction_commits_per_operation(db):
    with db_cursor(db) as (_, cur):
        cur.execute("SELECT 1")
    with db_cursor(db) as (_, cur):
        cur.execute("SELECT 2")

    assert len(db.opened) == 2
    assert all(c.commits == 1 and c.closed for c in db.opened)


def test_cursor_outside_transaction_rolls_back_on_error(db):
    with pytest.raises(ConcurrencyConflictError):
        with db_cursor(db) as (conn, cur):
            conn.fail_with = driver_error(MYSQL_LOCK_WAIT_TIMEOUT)
            cur.execute("UPDATE employees SET designation_id=2")

    conn = db.opened[0]
    assert conn.commits == 0
    assert conn.rollbacks == 1
    assert conn.closed


def test_failed_rollback_keeps_the_conflict(db):
    with pytest.raises(ConcurrencyConflictError):
        with db.transaction():
            with db_cursor(db) as (conn, cur):
                conn.fail_with = driver_error(MYSQL_DEADLOCK)
                conn.fail_rollback_with = driver_error(2013)
                cur.execute("UPDATE leaves SET status='Approved'")

    assert db.opened[0].closed
    assert db.active_connection() is None


def test_failed_rollback_outside_transaction_keeps_the_conflict(db):
    with pytest.raises(ConcurrencyConflictError):
        with db_cursor(db) as (conn, cur):
            conn.fail_with = driver_error(MYSQL_LOCK_WAIT_TIMEOUT)
            conn.fail_rollback_with = driver_error(2013)
            cur.execute("UPDATE employees SET designation_id=2")

    assert db.opened[0].closed
