# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import logging
import os
from collections.abc import Callable, Sequence
from typing import NoReturn

from ..media.request import PlaybackRequest


class HandoffReturnedError(RuntimeError):
    """The exec function came back; the process was not replaced."""


class FallbackExecutor:
    """Replace the current process with the local player.

    The player gets its configured arguments plus the original, unrewritten
    URL: it runs on the same machine as the loopback stream server, so the
    loopback address is exactly what it needs.
    """

    def __init__(self, command: Sequence[str], exec_fn: Callable[[str, list[str]], object] | None = None):
        if not command:
            raise ValueError("local player command is empty")
        self.command = list(command)
        self._exec = exec_fn or os.execvp

    def argv(self, url: str) -> list[str]:
        return [*self.command, url]

    def hand_off(self, request: PlaybackRequest) -> NoReturn:
        """Exec the local player. Never returns.

        Raises:
            OSError: If the player binary cannot be executed
            HandoffReturnedError: If the exec function returned
        """
        argv = self.argv(request.raw)
        for handler in logging.getLogger().handlers:
            handler.flush()

        self._exec(argv[0], argv)
        raise HandoffReturnedError(f"exec of {argv[0]} returned")
