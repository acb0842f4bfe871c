"""
Pytest configuration for the biotrack backend.

Every test gets a fresh app on an in-memory SQLite database with all tables
created, and runs inside that app's context.
"""

from contextlib import contextmanager

import pytest
from sqlalchemy import event

from biotrack import create_app
from biotrack.config import TestingConfig
from biotrack.extensions import db as _db


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@contextmanager
def recorded_statements(engine):
    """Collect every SQL statement sent to `engine` inside the block."""
    statements = []

    def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", _before_cursor_execute)
    try:
        yield statements
    finally:
        event.remove(engine, "before_cursor_execute", _before_cursor_execute)
