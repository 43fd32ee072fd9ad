# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import asyncio
import logging

import aiohttp

from ..exceptions import ProbeFailedError
from ..utils.helpers import mask


class ReachabilityProber:
    """Fast existence check against the remote player's HTTP endpoint.

    Issues ``GET http://<host>/`` with a sub-second ceiling so an unreachable
    remote is abandoned quickly. A timeout, a connection failure and a status
    of 400 or above are all reported the same way.
    """

    def __init__(self, host: str, connect_timeout: float = 0.3, total_timeout: float = 0.8):
        self.host = host
        self.connect_timeout = connect_timeout
        self.total_timeout = total_timeout
        self.logger = logging.getLogger("probe")

    @property
    def url(self) -> str:
        return f"http://{self.host}/"

    async def probe(self) -> None:
        """Return if the remote answered in time, raise otherwise.

        Raises:
            ProbeFailedError: If the remote is unreachable, slow, or errors
        """
        message = f"Remote VLC server unreachable ({mask(self.url)})."
        timeout = aiohttp.ClientTimeout(total=self.total_timeout, connect=self.connect_timeout)

        try:
            async with (
                aiohttp.ClientSession(timeout=timeout) as session,
                session.get(self.url, allow_redirects=True) as resp,
            ):
                status = resp.status
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            self.logger.debug(f"probe {mask(self.url)} failed: {e!r}")
            raise ProbeFailedError(message, endpoint=self.url) from e

        if status >= 400:
            self.logger.debug(f"probe {mask(self.url)} answered {status}")
            raise ProbeFailedError(message, endpoint=self.url, status=status)

        self.logger.debug(f"probe {mask(self.url)} answered {status}")
