# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import asyncio
import logging

import websockets
from websockets.exceptions import WebSocketException

from ..exceptions import DispatchFailedError
from ..utils.helpers import is_websocket_url, mask
from .protocol import ControlChannel


def is_benign_disconnect(exc: BaseException) -> bool:
    """Check if an exception represents a benign disconnection."""
    if isinstance(exc, OSError) and getattr(exc, "winerror", None) in (64, 121):
        return True
    if isinstance(exc, ConnectionResetError):
        return True
    return False


class WebSocketControlChannel(ControlChannel):
    """websockets-library implementation of the control channel.

    Opens a connection, sends the payload as one text frame, reads one
    response frame and closes. Connection setup, the response wait and the
    closing handshake are each bounded by the channel timeout.
    """

    name = "websockets"

    def is_available(self) -> bool:
        return is_websocket_url(self.url)

    async def send(self, payload: str) -> str:
        logger = logging.getLogger("websocket")

        try:
            async with websockets.connect(
                self.url,
                open_timeout=self.timeout,
                close_timeout=self.timeout,
                ping_interval=None,
            ) as ws:
                await ws.send(payload)
                response = await asyncio.wait_for(ws.recv(), timeout=self.timeout)

        except (WebSocketException, OSError, asyncio.TimeoutError, ValueError) as exc:
            # ValueError: unusable URI, e.g. a port out of range
            if is_benign_disconnect(exc):
                logger.info(f"disconnect from {mask(self.url)} ({type(exc).__name__}: {exc})")
            else:
                logger.warning(f"websocket error for {mask(self.url)}: {exc!r}")
            raise DispatchFailedError("WebSocket transmission failed.", endpoint=self.url) from exc

        if isinstance(response, bytes):
            response = response.decode("utf-8", errors="replace")

        logger.debug(f"received {len(response)} chars from {mask(self.url)}")
        return response
