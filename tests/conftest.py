"""Shared fixtures for bridge tests."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from vlc_bridge.config import BridgeConfig
from vlc_bridge.control import ControlChannel, RemoteDispatcher
from vlc_bridge.playback import DecisionEngine, FallbackExecutor


class FakeChannel(ControlChannel):
    """In-memory control channel recording every payload it is given."""

    name = "fake"

    def __init__(self, response: str = "OK", available: bool = True, error: Exception | None = None):
        super().__init__("ws://192.168.1.50", 1.0)
        self.response = response
        self.available = available
        self.error = error
        self.sent: list[str] = []

    def is_available(self) -> bool:
        return self.available

    async def send(self, payload: str) -> str:
        self.sent.append(payload)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def _close_file_handlers():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def bridge_config(tmp_path) -> BridgeConfig:
    return BridgeConfig(
        remote_host="192.168.1.50",
        ws_url="ws://192.168.1.50",
        stream_host="192.168.1.20",
        local_command_line="vlc --one-instance",
        log_verbosity=0,
        log_dir=f"{tmp_path}/logs/",
        log_file=f"{tmp_path}/logs/hayase-vlc-bridge.log",
    )


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def prober() -> MagicMock:
    prober = MagicMock()
    prober.probe = AsyncMock(return_value=None)
    return prober


@pytest.fixture
def exec_fn() -> MagicMock:
    return MagicMock(return_value=None)


@pytest.fixture
def engine(bridge_config, prober, channel, exec_fn) -> DecisionEngine:
    return DecisionEngine(
        bridge_config,
        prober=prober,
        dispatcher=RemoteDispatcher(channel, bridge_config.error_markers),
        executor=FallbackExecutor(bridge_config.local_command, exec_fn=exec_fn),
    )
