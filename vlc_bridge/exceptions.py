# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Routing exceptions split into fatal and recoverable failures.

Every failure raised while routing a playback request belongs to exactly one
of two families:

    BridgeAbortError        the input or the configuration is broken. Nothing
                            is played and the invocation exits non-zero.
    RemoteUnavailableError  the remote player cannot take the stream. The
                            original URL is handed to the local player.

Design Pattern:
    Diagnostic information (status codes, raw responses, transport errors) is
    logged where the failure is detected. The exception carries the short
    reason that ends up in the final disposition.
"""


class BridgeError(Exception):
    """Base exception for playback routing errors.

    Attributes:
        reason: Human-readable reason reported for the disposition
        recoverable: Whether local playback can still satisfy the request
    """

    def __init__(self, message: str, recoverable: bool = False):
        """Initialize bridge error.

        Args:
            message: Human-readable error description
            recoverable: Whether the request can fall back to local playback
        """
        super().__init__(message)
        self.reason = message
        self.recoverable = recoverable


class BridgeAbortError(BridgeError):
    """Fatal errors: the request itself cannot be played anywhere.

    Raised for:
    - Missing or malformed stream argument
    - URL normalization producing an empty URL or payload
    - Missing or placeholder configuration values
    """

    def __init__(self, message: str):
        super().__init__(message, recoverable=False)


class InvalidInputError(BridgeAbortError):
    """No URL was given, or the argument has no scheme separator."""


class NormalizationError(BridgeAbortError):
    """URL normalization failed or produced an empty result."""


class ConfigurationError(BridgeAbortError):
    """A required configuration value is missing or unusable.

    Attributes:
        field: Name of the offending configuration key (e.g. REMOTE_HOST)
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class RemoteUnavailableError(BridgeError):
    """Recoverable errors: the remote player cannot take the stream.

    Raised for:
    - Remote HTTP endpoint unreachable, slow or answering with an error status
    - Control channel transport not available on this machine
    - Transport-level send failures
    - Responses containing an error marker

    These are never retried against the remote. The request falls back to
    local playback instead.

    Attributes:
        endpoint: Address of the remote endpoint involved, if known
    """

    def __init__(self, message: str, endpoint: str | None = None):
        super().__init__(message, recoverable=True)
        self.endpoint = endpoint


class ProbeFailedError(RemoteUnavailableError):
    """Reachability probe timed out, could not connect, or got a bad status."""

    def __init__(self, message: str, endpoint: str | None = None, status: int | None = None):
        super().__init__(message, endpoint)
        self.status = status


class ChannelUnavailableError(RemoteUnavailableError):
    """The control channel transport cannot be used on this machine."""


class DispatchFailedError(RemoteUnavailableError):
    """The command could not be delivered over the control channel."""


class RemoteRejectedError(RemoteUnavailableError):
    """The remote answered, but the response text carries an error marker.

    Attributes:
        response: Raw response text
        marker: Error marker that matched
    """

    def __init__(self, message: str, response: str, marker: str, endpoint: str | None = None):
        super().__init__(message, endpoint)
        self.response = response
        self.marker = marker
