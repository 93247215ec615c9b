from __future__ import annotations

from datetime import time, timedelta
from pathlib import Path

import mysql.connector
import pytest
from mysql.connector import errorcode

from lab_attendance.core.exceptions import ConflictError, TransportError, ValidationError
from lab_attendance.database.bootstrap import _iter_sql_statements, _strip_comments, _strip_create_db_and_use
from lab_attendance.database.mysql_base import db_cursor, normalize_mysql_time

SCHEMA = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


class FakeCursor:
    def close(self):
        pass


class FakeConn:
    def __init__(self):
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return FakeCursor()

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn=None, error=None):
        self._conn = conn
        self._error = error

    def connect(self, *, with_database=True):
        if self._error:
            raise self._error
        return self._conn


def test_schema_splits_into_table_statements():
    sql = _strip_comments(_strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8")))
    statements = list(_iter_sql_statements(sql))

    assert not any(s.upper().startswith(("CREATE DATABASE", "USE ")) for s in statements)
    tables = [s.split()[5] for s in statements if s.upper().startswith("CREATE TABLE IF NOT EXISTS")]
    assert tables == ["operators", "students", "lab_sessions", "attendance"]


def test_semicolon_inside_quotes_does_not_split():
    assert list(_iter_sql_statements("INSERT INTO t VALUES ('a;b'); SELECT 1")) == [
        "INSERT INTO t VALUES ('a;b')",
        "SELECT 1",
    ]


@pytest.mark.parametrize(
    "raw, expected",
    [
        (time(9, 30), time(9, 30)),
        (timedelta(hours=14, minutes=5), time(14, 5)),
        ("08:30:15", time(8, 30, 15)),
        (None, None),
    ],
)
def test_normalize_mysql_time(raw, expected):
    assert normalize_mysql_time(raw) == expected


def test_duplicate_key_becomes_conflict_and_rolls_back():
    conn = FakeConn()

    with pytest.raises(ConflictError):
        with db_cursor(FakeFactory(conn)):
            raise mysql.connector.IntegrityError(msg="Duplicate entry 'EN001'", errno=errorcode.ER_DUP_ENTRY)

    assert conn.rolled_back and conn.closed and not conn.committed


def test_value_too_long_becomes_validation_error():
    conn = FakeConn()

    with pytest.raises(ValidationError, match="Data too long"):
        with db_cursor(FakeFactory(conn)):
            raise mysql.connector.DataError(msg="Data too long for column 'enrollment'", errno=errorcode.ER_DATA_TOO_LONG)

    assert conn.rolled_back and not conn.committed


def test_unreachable_server_is_transport_error():
    err = mysql.connector.InterfaceError(msg="Can't connect", errno=errorcode.CR_CONN_HOST_ERROR)

    with pytest.raises(TransportError):
        with db_cursor(FakeFactory(error=err)):
            pass


def test_success_commits_and_closes():
    conn = FakeConn()

    with db_cursor(FakeFactory(conn)):
        pass

    assert conn.committed and conn.closed
