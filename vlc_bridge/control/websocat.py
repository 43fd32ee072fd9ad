# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import asyncio
import contextlib
import logging
import shutil

from ..exceptions import DispatchFailedError
from ..utils.helpers import mask
from .protocol import ControlChannel


class WebsocatControlChannel(ControlChannel):
    """Control channel that shells out to the ``websocat`` CLI.

    Runs ``websocat -n1 <url>``, writes the payload as one line on stdin and
    returns everything the tool printed (stdout and stderr merged).
    """

    name = "websocat"

    def __init__(self, url: str, timeout: float, binary: str = "websocat"):
        super().__init__(url, timeout)
        self.binary = binary

    def is_available(self) -> bool:
        return shutil.which(self.binary) is not None

    async def send(self, payload: str) -> str:
        logger = logging.getLogger("websocat")

        try:
            proc = await asyncio.create_subprocess_exec(
                self.binary, "-n1", self.url,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            logger.warning(f"cannot start {self.binary}: {e!r}")
            raise DispatchFailedError("WebSocket transmission failed.", endpoint=self.url) from e

        try:
            out, _ = await asyncio.wait_for(
                proc.communicate(f"{payload}\n".encode("utf-8")),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            logger.warning(f"{self.binary} timed out after {self.timeout}s for {mask(self.url)}")
            raise DispatchFailedError("WebSocket transmission failed.", endpoint=self.url) from e

        response = (out or b"").decode("utf-8", errors="replace").strip()
        if proc.returncode != 0:
            logger.warning(f"{self.binary} exited with {proc.returncode}: {response}")
            raise DispatchFailedError("WebSocket transmission failed.", endpoint=self.url)

        return response
