"""
Shared pytest fixtures for the PikaMC bot test suite.

Discord objects are faked with SimpleNamespace/AsyncMock; panel HTTP goes
through httpx.MockTransport so requests can be inspected without a network.
"""

from types import SimpleNamespace
from typing import Callable, List
from unittest.mock import AsyncMock

import httpx
import pytest

from pikamc_bot.config.settings import Settings

PANEL_BASE = "https://panel.test/api/client"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        DISCORD_TOKEN="discord-token",
        ERROR_CHANNEL_ID="424242",
        PIKAMC_BASE_URL=PANEL_BASE + "/",
        PIKAMC_API_KEY="panel-key",
        PIKAMC_SERVER_ID="abc123",
        DEEPSEEK_BASE_URL="https://ai.test/v1",
        DEEPSEEK_API_KEY="ai-key",
        DEEPSEEK_MODEL="deepseek-chat",
    )


@pytest.fixture
def reporter() -> SimpleNamespace:
    return SimpleNamespace(report=AsyncMock())


@pytest.fixture
def make_message() -> Callable[..., SimpleNamespace]:
    def _make(content: str, *, bot: bool = False) -> SimpleNamespace:
        return SimpleNamespace(
            id=1,
            content=content,
            author=SimpleNamespace(bot=bot),
            reply=AsyncMock(),
        )

    return _make


class RecordingTransport:
    """Builds an httpx.MockTransport that records requests and returns a canned response."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []
        self._responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def panel_transport() -> Callable[..., RecordingTransport]:
    def _build(responder: Callable[[httpx.Request], httpx.Response]) -> RecordingTransport:
        return RecordingTransport(responder)

    return _build


@pytest.fixture
def fake_bot(settings, reporter) -> SimpleNamespace:
    return SimpleNamespace(settings=settings, reporter=reporter, api=None, ai=None)
