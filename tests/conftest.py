"""Shared test fixtures for the lead capture test suite.

Provides:
- app: Flask app configured for testing (in-memory SQLite, fake credentials)
- client: Flask test client
- db_session: clean database per test (tables created/dropped)
- fake_response: builder for mocked `requests` responses
"""

from unittest.mock import MagicMock

import pytest

from app import create_app
from app.config import IntegrationSettings
from app.extensions import db as _db


@pytest.fixture(scope="session")
def app():
    """Create the Flask application configured for testing."""
    app = create_app("testing")
    yield app


@pytest.fixture(autouse=True)
def db_session(app):
    """Create all tables before each test, drop after."""
    with app.app_context():
        _db.create_all()
        yield _db.session
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def settings(app):
    """IntegrationSettings with every integration enabled (test credentials)."""
    return IntegrationSettings.from_config(app.config)


def make_response(status_code=200, json_data=None, text=""):
    """Build a stand-in for requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    if json_data is None:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
        resp.text = text
    else:
        resp.json.return_value = json_data
        resp.text = text or str(json_data)
    return resp


@pytest.fixture
def fake_response():
    return make_response
