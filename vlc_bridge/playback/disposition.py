# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

from dataclasses import dataclass
from enum import Enum

from ..media.request import PlaybackRequest


class DispositionKind(Enum):
    """Terminal outcomes of one invocation."""

    REMOTE_SUCCESS = "remote_success"
    FALLBACK = "fallback"
    ABORT = "abort"


@dataclass(frozen=True)
class Disposition:
    """The single outcome reached by one invocation.

    ``request`` is set whenever the input got far enough to be parsed; a
    fallback always carries it, since the local player needs the original URL.
    """

    kind: DispositionKind
    reason: str = ""
    request: PlaybackRequest | None = None

    def __post_init__(self):
        if self.kind is DispositionKind.FALLBACK and self.request is None:
            raise ValueError("fallback disposition requires the original request")

    @classmethod
    def remote_success(cls, request: PlaybackRequest) -> "Disposition":
        return cls(DispositionKind.REMOTE_SUCCESS, "", request)

    @classmethod
    def fallback(cls, reason: str, request: PlaybackRequest) -> "Disposition":
        return cls(DispositionKind.FALLBACK, reason, request)

    @classmethod
    def abort(cls, reason: str, request: PlaybackRequest | None = None) -> "Disposition":
        return cls(DispositionKind.ABORT, reason, request)

    @property
    def exit_code(self) -> int | None:
        """Process exit status, or None for a fallback (the process is replaced)."""
        if self.kind is DispositionKind.REMOTE_SUCCESS:
            return 0
        if self.kind is DispositionKind.ABORT:
            return 1
        return None
