import os
import sys
import random
import pytest

# Ensure the server root (containing the `wordzy` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
SERVER_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if SERVER_ROOT not in sys.path:
    sys.path.insert(0, SERVER_ROOT)

from wordzy import create_app
from wordzy.config import TestingConfig
from wordzy.services.game_service import GameService
from wordzy.services.room_service import RoomService

TARGET = 'CRANE'
TIME_LIMIT_MS = 180_000


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start=1_000_000):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


class RecordingTimer:
    """Stands in for RoundTimer and records start/cancel calls."""

    def __init__(self):
        self.started = []
        self.cancelled = []
        self.active = {}

    def start(self, room_id, session_id):
        self.started.append((room_id, session_id))
        self.active[room_id] = session_id

    def cancel(self, room_id, session_id=None):
        self.cancelled.append(room_id)
        self.active.pop(room_id, None)


def names(events):
    return [e.event for e in events]


def named(events, name):
    return [e for e in events if e.event == name]


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def timer():
    return RecordingTimer()


@pytest.fixture()
def game_service():
    return GameService(time_limit_ms=TIME_LIMIT_MS, word_list=[TARGET], rng=random.Random(7))


@pytest.fixture()
def room_service(game_service, timer, clock):
    return RoomService(game_service, timer=timer, clock=clock)


@pytest.fixture()
def room_with_players(room_service):
    """A waiting room owned by p1 with p2 and p3 joined, in that order."""
    room_id = room_service.create_room('p1', 'alice')
    room_service.join(room_id, 'p2', 'bob')
    room_service.join(room_id, 'p3', 'carol')
    return room_id


@pytest.fixture()
def flask_app():
    application, _ = create_app(TestingConfig)
    # Deterministic target word for end-to-end flows
    application.extensions['wordzy'].game_service.word_list = [TARGET]
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def signup(client):
    """Register a player over HTTP and return the signup response body."""
    def _signup(username, password='secret123'):
        res = client.post('/api/players/signup', json={'username': username, 'password': password})
        assert res.status_code == 201
        return res.get_json()
    return _signup


@pytest.fixture()
def sio_factory(flask_app):
    """Connect authenticated Socket.IO test clients; all are disconnected at teardown."""
    clients = []

    def _connect(user):
        test_client = flask_app.socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client()
        )
        test_client.emit('authenticate', {'token': user['token'], 'playerId': user['userId']})
        received = test_client.get_received()
        assert any(pkt['name'] == 'authenticated' for pkt in received)
        clients.append(test_client)
        return test_client

    yield _connect

    for test_client in clients:
        if test_client.is_connected():
            test_client.disconnect()
