"""Shared fixtures for buzzer game tests."""

import pytest
from fastapi.testclient import TestClient

from core.game_manager import BuzzerGame, get_game
from main import app
from models import ClientSession
from services.broadcast_service import BroadcastHub, get_hub

ROUND_START_MS = 1_700_000_000_000


class FakeClock:
    """Millisecond clock that only moves when a test advances it."""

    def __init__(self, now: int = ROUND_START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeWebSocket:
    """Records every JSON frame the hub sends."""

    def __init__(self, fail_on_send: bool = False):
        self.accepted = False
        self.sent: list[dict] = []
        self.fail_on_send = fail_on_send

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, data) -> None:
        if self.fail_on_send:
            raise RuntimeError("socket closed")
        self.sent.append(data)

    def events(self) -> list[str]:
        return [m["event"] for m in self.sent]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def game(clock):
    return BuzzerGame(clock=clock)


@pytest.fixture
def hub():
    return BroadcastHub()


@pytest.fixture
def make_session():
    def _make():
        return ClientSession(FakeWebSocket())

    return _make


@pytest.fixture
def client(game, hub):
    """TestClient wired to a fresh game and hub for every test."""
    app.dependency_overrides[get_game] = lambda: game
    app.dependency_overrides[get_hub] = lambda: hub
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
