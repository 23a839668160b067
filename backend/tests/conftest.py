import os
import sys
from datetime import datetime, timedelta

import pytest

# Ensure the backend root (containing the `candle` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from candle import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = '*'
    LOG_LEVEL = 'DEBUG'
    MAX_CONTENT_LENGTH = 1024 * 1024
    # Keep bcrypt fast under test
    BCRYPT_LOG_ROUNDS = 4
    MESSAGE_TTL_SEC = 24 * 60 * 60
    MESSAGE_MAX_LENGTH = 200
    MESSAGE_SWEEP_INTERVAL_SEC = 0
    PROFILE_PICTURE_MAX_BYTES = 32 * 1024
    SEARCH_LIMIT = 10
    PUBLICATION_RETENTION = 0


class FakeClock:
    """Settable clock for exercising message expiry."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 1, 1, 12, 0, 0)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import candle.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def service(flask_app):
    return flask_app.extensions['candle']


@pytest.fixture()
def clock(service):
    fake = FakeClock()
    service.messages.clock = fake
    return fake


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


def register(client, username, password='secret'):
    res = client.get('/register', query_string={'username': username, 'password': password})
    assert res.status_code == 201, res.get_json()
    return res.get_json()['userId']
