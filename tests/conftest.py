"""
Shared fixtures: a scriptable fake Postgres connection and a Flask test client.

Nothing here talks to a real database, OpenAI, the Fresh API, S3 or Redis.
"""

import importlib
import os
import sys

# Keep test runs from writing logs/pacelane.log
os.environ.setdefault('LOG_FILE_ENABLED', 'false')
os.environ.setdefault('FLASK_ENV', 'testing')

# Add src/ to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

import pytest


class FakeCursor:
    def __init__(self, db):
        self.db = db
        self.rowcount = db.rowcount

    def execute(self, sql, params=None):
        normalized = ' '.join(sql.split())
        self.db.executed.append((normalized, params))
        if self.db.fail_on and self.db.fail_on in normalized:
            raise self.db.error

    def fetchone(self):
        if self.db.fetchone_results:
            return self.db.fetchone_results.pop(0)
        return None

    def fetchall(self):
        if self.db.fetchall_results:
            return self.db.fetchall_results.pop(0)
        return []


class FakeConnection:
    def __init__(self, db):
        self.db = db

    def cursor(self):
        return FakeCursor(self.db)

    def commit(self):
        self.db.commits += 1

    def rollback(self):
        self.db.rollbacks += 1

    def close(self):
        self.db.closed += 1


class FakeDatabase:
    """
    Records every statement and hands back queued results.

    fetchone_results / fetchall_results are consumed in order across all
    connections the code under test opens.
    """

    def __init__(self):
        self.executed = []
        self.fetchone_results = []
        self.fetchall_results = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = 0
        self.rowcount = 1
        self.fail_on = None
        self.error = None
        self.connections = 0

    def connect(self):
        self.connections += 1
        return FakeConnection(self)

    def statements(self):
        return [sql for sql, _ in self.executed]


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def web():
    """The pacelane.app module (the package attribute `app` is the Flask object)"""
    return importlib.import_module('pacelane.app')


@pytest.fixture
def client(web):
    web.app.config['TESTING'] = True
    with web.app.test_client() as test_client:
        yield test_client


@pytest.fixture
def logged_in_client(client):
    with client.session_transaction() as sess:
        sess['user_id'] = 1
        sess['user_name'] = 'Ana'
    return client
