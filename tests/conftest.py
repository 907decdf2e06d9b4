"""Pytest fixtures for the memory album service."""

from __future__ import annotations

import os
import sys
import tempfile
from typing import Generator, Iterator

import pytest
from flask import Flask

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# TestingConfig resolves its database URI at import time.
_fd, _TEST_DB_PATH = tempfile.mkstemp(prefix="memory-album-test-", suffix=".db")
os.close(_fd)
os.environ["DATABASE_URL_TEST"] = f"sqlite:///{_TEST_DB_PATH}"

from memory_album import create_app  # noqa: E402
from memory_album.extensions import db as _db  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _cleanup_test_database() -> Generator[None, None, None]:
    """Remove the temporary SQLite file once the session ends."""
    try:
        yield
    finally:
        try:
            os.remove(_TEST_DB_PATH)
        except OSError:
            pass


@pytest.fixture()
def app() -> Iterator[Flask]:
    application = create_app("testing")
    with application.app_context():
        _db.create_all()
    try:
        yield application
    finally:
        with application.app_context():
            _db.session.remove()
            _db.drop_all()


@pytest.fixture()
def db_session(app):
    """Provide a database session bound to the test app."""
    return _db.session


@pytest.fixture()
def client(app):
    return app.test_client()
