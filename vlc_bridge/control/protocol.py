# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

from abc import ABC, abstractmethod
from typing import ClassVar

from ..exceptions import ConfigurationError


class ControlChannel(ABC):
    """Abstract base class for one-shot control channels to the remote player.

    A channel sends a single text payload and returns the first text response.
    Implementations wrap every transport failure in ``DispatchFailedError``.
    """

    name: ClassVar[str] = "control"

    def __init__(self, url: str, timeout: float):
        self.url = url
        self.timeout = timeout

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this channel can be used on this machine for ``self.url``."""
        pass

    @abstractmethod
    async def send(self, payload: str) -> str:
        """Send ``payload`` and return the response text.

        Raises:
            DispatchFailedError: If the payload could not be delivered or no
                response arrived within ``self.timeout``
        """
        pass

    def __repr__(self):
        return f"{type(self).__name__}(url={self.url}, timeout={self.timeout})"


class ControlChannelFactory:
    """Factory for creating control channels by transport name."""

    _channels: ClassVar[dict[str, type[ControlChannel]]] = {}

    @classmethod
    def register(cls, name: str, channel_class: type[ControlChannel]) -> None:
        """Register a control channel implementation."""
        cls._channels[name] = channel_class

    @classmethod
    def available_transports(cls) -> list[str]:
        return sorted(cls._channels)

    @classmethod
    def create(cls, transport: str, url: str, timeout: float, **options) -> ControlChannel:
        """Create the channel registered under ``transport``.

        Raises:
            ConfigurationError: If no channel is registered under that name
        """
        channel_class = cls._channels.get(transport)
        if channel_class is None:
            raise ConfigurationError(
                f"Unknown control transport '{transport}' (expected one of {', '.join(cls.available_transports())}).",
                field="control.transport",
            )
        return channel_class(url, timeout, **options)
