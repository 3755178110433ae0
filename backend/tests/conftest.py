import pytest

from typerace.config import Config
from typerace.game.service import GameService
from typerace.server import create_app


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SOCKETIO_ASYNC_MODE = "threading"
    TRUST_PROXY_HEADERS = False
    PLAYERS_PER_GAME = 2
    WORDS_PER_GAME = 2
    WORDS_PREVIEW_COUNT = 2
    # Drain on join only; no background loop in tests
    QUEUE_CHECK_INTERVAL_SEC = 0
    MATCH_ON_JOIN = True
    QUEUE_ALLOW_DUPLICATES = False
    SESSION_HISTORY_LIMIT = 10


class FakeClock:
    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def service(clock):
    return GameService(players_per_game=2, words_per_game=2, clock=clock)


@pytest.fixture()
def app_and_socketio():
    return create_app(TestConfig)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(app_and_socketio):
    flask_app, socketio = app_and_socketio
    created = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        created.append(test_client)
        return test_client

    yield _make

    for test_client in created:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
