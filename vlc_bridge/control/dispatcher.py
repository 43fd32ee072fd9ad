# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import logging
from collections.abc import Iterable

from ..exceptions import ChannelUnavailableError, RemoteRejectedError
from ..media.request import NormalizedCommand
from ..utils.helpers import mask
from .protocol import ControlChannel


DEFAULT_ERROR_MARKERS = ("invalid request", "error", "failed")


class RemoteDispatcher:
    """Deliver one command over a control channel and judge the answer.

    A response counts as a rejection when it contains, case-insensitively,
    any of the configured error markers. The marker vocabulary belongs to the
    remote implementation, so it is passed in rather than fixed here.
    """

    def __init__(self, channel: ControlChannel, error_markers: Iterable[str] = DEFAULT_ERROR_MARKERS):
        self.channel = channel
        self.error_markers = tuple(m.lower() for m in error_markers if m)
        self.logger = logging.getLogger("control")

    def ensure_available(self) -> None:
        """Raise ChannelUnavailableError if the channel cannot be used."""
        if not self.channel.is_available():
            raise ChannelUnavailableError(
                f"{self.channel.name} unavailable (cannot send to remote VLC).",
                endpoint=self.channel.url,
            )

    def find_error_marker(self, response: str) -> str | None:
        lowered = response.lower()
        for marker in self.error_markers:
            if marker in lowered:
                return marker
        return None

    async def dispatch(self, command: NormalizedCommand) -> str:
        """Send the command payload and return the accepted response.

        Raises:
            DispatchFailedError: If the transport failed
            RemoteRejectedError: If the response carries an error marker
        """
        self.logger.debug(f"WS url=<{mask(self.channel.url)}>")
        self.logger.debug(f"WS json=<{command.payload}>")

        response = await self.channel.send(command.payload)
        self.logger.info(f"VLC response=<{response}>")

        marker = self.find_error_marker(response)
        if marker is not None:
            raise RemoteRejectedError(
                "WebSocket response indicates an error.",
                response=response,
                marker=marker,
                endpoint=self.channel.url,
            )
        return response
