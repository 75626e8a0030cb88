# tests/test_db.py

"""
Tests for the startup database lifecycle in `connect_db`.
"""

import logging
from unittest import mock

import pytest
from sqlalchemy.exc import OperationalError

from products_api import db
from products_api.db import DatabaseUnavailableError, connect_db


def _unreachable(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("connection refused"))


def test_connect_db_success():
    assert connect_db(max_retries=1, retry_delay=0, fail_fast=True) is True


def test_connect_db_fail_fast_raises():
    with mock.patch.object(db.engine, "connect", side_effect=_unreachable):
        with pytest.raises(DatabaseUnavailableError):
            connect_db(max_retries=2, retry_delay=0, fail_fast=True)


def test_connect_db_logs_and_continues_without_fail_fast(caplog):
    caplog.set_level(logging.INFO, logger="products_api.db")
    with mock.patch.object(db.engine, "connect", side_effect=_unreachable):
        assert connect_db(max_retries=1, retry_delay=0, fail_fast=False) is False

    assert any("Database connection error" in r.getMessage() for r in caplog.records)


def test_connect_db_retries_with_backoff():
    with mock.patch.object(db.engine, "connect", side_effect=_unreachable) as connect, \
            mock.patch.object(db.time, "sleep") as sleep:
        connect_db(max_retries=3, retry_delay=1, fail_fast=False)

    assert connect.call_count == 3
    assert [call.args[0] for call in sleep.call_args_list] == [1, 2]


def test_startup_exits_when_database_is_unreachable():
    from products_api.main import startup_event

    with mock.patch("products_api.main.connect_db", side_effect=DatabaseUnavailableError("down")):
        with pytest.raises(SystemExit) as excinfo:
            startup_event()
    assert excinfo.value.code == 1
