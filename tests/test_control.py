"""
Tests for the remote control layer: reachability probe, control channels,
channel factory and response classification.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiohttp import WSMsgType, web
from aiohttp.test_utils import TestServer

from conftest import FakeChannel
from vlc_bridge.control import (
    ControlChannelFactory,
    ReachabilityProber,
    RemoteDispatcher,
    WebsocatControlChannel,
    WebSocketControlChannel,
)
from vlc_bridge.exceptions import (
    ChannelUnavailableError,
    ConfigurationError,
    DispatchFailedError,
    ProbeFailedError,
    RemoteRejectedError,
)
from vlc_bridge.media import normalize_and_build_command


def _app(handler) -> web.Application:
    app = web.Application()
    app.router.add_get("/", handler)
    return app


class TestReachabilityProber:
    """Tests for ReachabilityProber."""

    def test_url(self) -> None:
        """Probe targets the remote HTTP root."""
        assert ReachabilityProber("192.168.1.50").url == "http://192.168.1.50/"
        assert ReachabilityProber("tv.local:8080").url == "http://tv.local:8080/"

    @pytest.mark.asyncio
    async def test_reachable(self) -> None:
        """A 200 answer is reachable."""
        async def ok(request):
            return web.Response(text="VLC bridge")

        async with TestServer(_app(ok)) as server:
            await ReachabilityProber(f"{server.host}:{server.port}").probe()

    @pytest.mark.asyncio
    async def test_redirect_followed(self) -> None:
        """Redirects to a healthy page count as reachable."""
        async def moved(request):
            raise web.HTTPFound("/index.html")

        async def index(request):
            return web.Response(text="ok")

        app = _app(moved)
        app.router.add_get("/index.html", index)

        async with TestServer(app) as server:
            await ReachabilityProber(f"{server.host}:{server.port}").probe()

    @pytest.mark.asyncio
    async def test_server_error(self) -> None:
        """A 5xx answer is unreachable."""
        async def boom(request):
            return web.Response(status=503)

        async with TestServer(_app(boom)) as server:
            with pytest.raises(ProbeFailedError) as exc_info:
                await ReachabilityProber(f"{server.host}:{server.port}").probe()

        assert exc_info.value.status == 503
        assert exc_info.value.recoverable

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        """A slow remote exceeds the ceiling and is unreachable."""
        async def slow(request):
            await asyncio.sleep(0.5)
            return web.Response(text="late")

        async with TestServer(_app(slow)) as server:
            prober = ReachabilityProber(f"{server.host}:{server.port}", total_timeout=0.1)
            with pytest.raises(ProbeFailedError, match="unreachable"):
                await prober.probe()

    @pytest.mark.asyncio
    async def test_connection_refused(self) -> None:
        """Nothing listening is unreachable."""
        with pytest.raises(ProbeFailedError):
            await ReachabilityProber("127.0.0.1:1").probe()


class TestWebSocketControlChannel:
    """Tests for the websockets-library channel against an aiohttp server."""

    def test_available_for_ws_urls(self) -> None:
        """Only ws:// and wss:// URLs can be used."""
        assert WebSocketControlChannel("ws://192.168.1.50", 1.0).is_available()
        assert WebSocketControlChannel("wss://tv.local/ws", 1.0).is_available()
        assert not WebSocketControlChannel("http://192.168.1.50", 1.0).is_available()

    @pytest.mark.asyncio
    async def test_send_and_receive(self) -> None:
        """Payload goes out as one text frame; the first reply comes back."""
        received = []

        async def handler(request):
            ws = web.WebSocketResponse()
            await ws.prepare(request)
            msg = await ws.receive()
            if msg.type == WSMsgType.TEXT:
                received.append(msg.data)
            await ws.send_str("OK")
            await ws.close()
            return ws

        async with TestServer(_app(handler)) as server:
            channel = WebSocketControlChannel(f"ws://{server.host}:{server.port}/", 2.0)
            response = await channel.send('{"type":"openURL","url":"http://h:1/a"}')

        assert response == "OK"
        assert received == ['{"type":"openURL","url":"http://h:1/a"}']

    @pytest.mark.asyncio
    async def test_no_reply_times_out(self) -> None:
        """A silent remote is a transport failure."""
        async def handler(request):
            ws = web.WebSocketResponse()
            await ws.prepare(request)
            async for _ in ws:
                pass
            return ws

        async with TestServer(_app(handler)) as server:
            channel = WebSocketControlChannel(f"ws://{server.host}:{server.port}/", 0.2)
            with pytest.raises(DispatchFailedError):
                await channel.send("{}")

    @pytest.mark.asyncio
    async def test_port_out_of_range(self) -> None:
        """An unusable port is a transport failure, not a crash."""
        channel = WebSocketControlChannel("ws://192.168.1.50:99999", 0.5)

        with pytest.raises(DispatchFailedError, match="transmission failed"):
            await channel.send("{}")

    @pytest.mark.asyncio
    async def test_connection_refused(self) -> None:
        """Nothing listening is a transport failure."""
        channel = WebSocketControlChannel("ws://127.0.0.1:1/", 0.5)
        with pytest.raises(DispatchFailedError, match="transmission failed"):
            await channel.send("{}")


class TestWebsocatControlChannel:
    """Tests for the websocat subprocess channel."""

    def test_available_when_on_path(self) -> None:
        """Availability follows PATH lookup of the binary."""
        channel = WebsocatControlChannel("ws://192.168.1.50", 1.0)
        with patch("vlc_bridge.control.websocat.shutil.which", return_value="/usr/bin/websocat"):
            assert channel.is_available()
        with patch("vlc_bridge.control.websocat.shutil.which", return_value=None):
            assert not channel.is_available()

    def test_custom_binary(self) -> None:
        """The binary name is looked up as configured."""
        channel = WebsocatControlChannel("ws://192.168.1.50", 1.0, binary="/opt/bin/websocat")
        with patch("vlc_bridge.control.websocat.shutil.which", return_value=None) as which:
            channel.is_available()
        which.assert_called_once_with("/opt/bin/websocat")

    @pytest.mark.asyncio
    async def test_send_writes_line(self) -> None:
        """Payload is written as one line; merged output is the response."""
        proc = MagicMock()
        proc.communicate = AsyncMock(return_value=(b"OK\n", None))
        proc.returncode = 0

        with patch(
            "vlc_bridge.control.websocat.asyncio.create_subprocess_exec",
            AsyncMock(return_value=proc),
        ) as create:
            response = await WebsocatControlChannel("ws://192.168.1.50", 1.0).send('{"a":1}')

        assert response == "OK"
        assert create.call_args.args[:3] == ("websocat", "-n1", "ws://192.168.1.50")
        proc.communicate.assert_awaited_once_with(b'{"a":1}\n')

    @pytest.mark.asyncio
    async def test_non_zero_exit(self) -> None:
        """A failing websocat run is a transport failure."""
        proc = MagicMock()
        proc.communicate = AsyncMock(return_value=(b"websocat: connection refused", None))
        proc.returncode = 1

        with patch(
            "vlc_bridge.control.websocat.asyncio.create_subprocess_exec",
            AsyncMock(return_value=proc),
        ):
            with pytest.raises(DispatchFailedError):
                await WebsocatControlChannel("ws://192.168.1.50", 1.0).send("{}")

    @pytest.mark.asyncio
    async def test_binary_missing(self) -> None:
        """An exec failure is a transport failure."""
        with patch(
            "vlc_bridge.control.websocat.asyncio.create_subprocess_exec",
            AsyncMock(side_effect=FileNotFoundError("websocat")),
        ):
            with pytest.raises(DispatchFailedError):
                await WebsocatControlChannel("ws://192.168.1.50", 1.0).send("{}")


class TestControlChannelFactory:
    """Tests for ControlChannelFactory."""

    def test_registered_transports(self) -> None:
        """Both transports are registered on import."""
        assert ControlChannelFactory.available_transports() == ["websocat", "websockets"]

    def test_create_websockets(self) -> None:
        """websockets transport builds the library channel."""
        channel = ControlChannelFactory.create("websockets", "ws://192.168.1.50", 2.0)
        assert isinstance(channel, WebSocketControlChannel)
        assert channel.timeout == 2.0

    def test_create_websocat_with_binary(self) -> None:
        """websocat transport accepts the binary option."""
        channel = ControlChannelFactory.create("websocat", "ws://192.168.1.50", 2.0, binary="wsc")
        assert isinstance(channel, WebsocatControlChannel)
        assert channel.binary == "wsc"

    def test_unknown_transport(self) -> None:
        """Unknown transports are a configuration error."""
        with pytest.raises(ConfigurationError):
            ControlChannelFactory.create("carrier-pigeon", "ws://x", 1.0)


class TestRemoteDispatcher:
    """Tests for RemoteDispatcher."""

    @pytest.fixture
    def command(self):
        return normalize_and_build_command("http://192.168.1.20:8080/stream.mkv")

    @pytest.mark.asyncio
    async def test_clean_response(self, command) -> None:
        """A clean response is returned."""
        channel = FakeChannel(response="OK")
        assert await RemoteDispatcher(channel).dispatch(command) == "OK"
        assert channel.sent == [command.payload]

    @pytest.mark.asyncio
    async def test_error_response(self, command) -> None:
        """A response with an error marker is rejected."""
        channel = FakeChannel(response='{"status":"error","detail":"bad url"}')

        with pytest.raises(RemoteRejectedError) as exc_info:
            await RemoteDispatcher(channel).dispatch(command)

        assert exc_info.value.marker == "error"
        assert exc_info.value.recoverable

    def test_markers_case_insensitive(self) -> None:
        """Markers match regardless of case on either side."""
        dispatcher = RemoteDispatcher(FakeChannel(), ["Invalid Request"])
        assert dispatcher.find_error_marker("INVALID REQUEST: missing url") == "invalid request"
        assert dispatcher.find_error_marker("ok") is None

    def test_ensure_available(self) -> None:
        """Unavailable channel raises a recoverable error."""
        with pytest.raises(ChannelUnavailableError):
            RemoteDispatcher(FakeChannel(available=False)).ensure_available()
        RemoteDispatcher(FakeChannel()).ensure_available()
