import os
import random
import sys
import pytest

# Ensure the backend root (containing the `bluffroom` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from bluffroom import create_app, socketio
from bluffroom.models import Question
from bluffroom.orchestrator import GameOrchestrator
from bluffroom.store import RoomStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = 'http://localhost:5173'
    SOCKETIO_NAMESPACE = '/ws'
    POINTS_PER_CORRECT_VOTE = 10
    LEADERBOARD_SIZE = 3


class RecordingBroadcaster:
    """Broadcaster double that tracks subscriptions and records deliveries."""

    def __init__(self):
        self.channels = {}
        self.sent = []  # (sid, event, payload) per delivery

    def subscribe(self, sid, code):
        self.channels.setdefault(code, [])
        if sid not in self.channels[code]:
            self.channels[code].append(sid)

    def unsubscribe(self, sid, code):
        if sid in self.channels.get(code, []):
            self.channels[code].remove(sid)

    def close(self, code):
        self.channels.pop(code, None)

    def to_room(self, code, event, payload=None, skip_sid=None):
        for sid in list(self.channels.get(code, [])):
            if sid != skip_sid:
                self.sent.append((sid, event, payload))

    def to_connection(self, sid, event, payload=None):
        self.sent.append((sid, event, payload))

    def events_for(self, sid, event=None):
        return [(e, p) for s, e, p in self.sent if s == sid and (event is None or e == event)]

    def payloads(self, sid, event):
        return [p for s, e, p in self.sent if s == sid and e == event]

    def clear(self):
        self.sent = []


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    created = []

    def make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws',
        )
        test_client.get_received('/ws')  # drop the 'connected' greeting
        created.append(test_client)
        return test_client

    yield make
    for test_client in created:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass


@pytest.fixture()
def store():
    return RoomStore()


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def game(store, broadcaster):
    return GameOrchestrator(store, broadcaster, rng=random.Random(1234))


@pytest.fixture()
def questions():
    return [
        Question(text='Capital of France?', correct_answer='Paris'),
        Question(text='2+2?', correct_answer='4', image_url='https://example.com/sum.png'),
    ]
