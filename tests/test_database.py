"""
tests/test_database.py — Tests for the storage helpers: path resolution and
the transaction context manager.
"""

import sqlite3

import pytest

import config
import database


class RecordingConnection:
    """Stand-in connection that records statements and can fail on one of them."""

    def __init__(self, fail_on=None):
        self.statements = []
        self.fail_on = fail_on
        self.closed = False

    def execute(self, sql, *args):
        self.statements.append(sql)
        if sql == self.fail_on:
            raise sqlite3.OperationalError('database is locked')

    def close(self):
        self.closed = True


def test_db_path_defaults_to_config_setting():
    assert database.get_db_path() == config.DATABASE


def test_db_path_uses_app_setting(app):
    assert database.get_db_path() == app.config['DATABASE']


def test_failed_begin_propagates_without_rollback(monkeypatch):
    conn = RecordingConnection(fail_on='BEGIN IMMEDIATE')
    monkeypatch.setattr(database, 'get_db', lambda: conn)

    with pytest.raises(sqlite3.OperationalError) as exc:
        with database.transaction():
            pytest.fail('body must not run when BEGIN fails')

    assert 'locked' in str(exc.value)
    assert conn.statements == ['BEGIN IMMEDIATE']
    assert conn.closed


def test_error_in_body_rolls_back(monkeypatch):
    conn = RecordingConnection()
    monkeypatch.setattr(database, 'get_db', lambda: conn)

    with pytest.raises(ValueError):
        with database.transaction():
            raise ValueError('bad row')

    assert conn.statements == ['BEGIN IMMEDIATE', 'ROLLBACK']
    assert conn.closed


def test_successful_body_commits(monkeypatch):
    conn = RecordingConnection()
    monkeypatch.setattr(database, 'get_db', lambda: conn)

    with database.transaction() as yielded:
        assert yielded is conn

    assert conn.statements == ['BEGIN IMMEDIATE', 'COMMIT']
    assert conn.closed
