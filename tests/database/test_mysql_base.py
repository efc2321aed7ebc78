from datetime import time, timedelta

import pytest

from staffing_backoffice.database.mysql_base import clock_from_row, db_cursor


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, None),
        (time(9, 30), time(9, 30)),
        (timedelta(hours=8, minutes=30, seconds=15), time(8, 30, 15)),
        (timedelta(0), time(0, 0)),
    ],
)
def test_clock_from_row(value, expected):
    assert clock_from_row(value) == expected


def test_clock_from_row_rejects_other_types():
    with pytest.raises(TypeError):
        clock_from_row("08:30:00")


class _Conn:
    def __init__(self):
        self.events = []

    def cursor(self, dictionary=True):
        conn = self

        class _Cur:
            def close(self):
                conn.events.append("close_cursor")

        return _Cur()

    def commit(self):
        self.events.append("commit")

    def rollback(self):
        self.events.append("rollback")

    def close(self):
        self.events.append("close")


class _Factory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        return self.conn


def test_db_cursor_commits_on_success():
    conn = _Conn()

    with db_cursor(_Factory(conn)):
        pass

    assert conn.events == ["commit", "close_cursor", "close"]


def test_db_cursor_rolls_back_on_error():
    conn = _Conn()

    with pytest.raises(RuntimeError):
        with db_cursor(_Factory(conn)):
            raise RuntimeError("boom")

    assert conn.events == ["close_cursor", "rollback", "close"]
