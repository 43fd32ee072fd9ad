# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import json
import logging
from urllib.parse import quote, unquote

from ..exceptions import NormalizationError
from .request import NormalizedCommand


# Loopback prefixes the stream server hands out; only reachable from this machine
LOOPBACK_PREFIXES = ("http://localhost:", "http://127.0.0.1:")

# Reserved characters kept literal when re-encoding (unreserved ones always are)
URL_SAFE_CHARS = ":/%?=&"

# Command discriminator understood by the remote VLC bridge
OPEN_URL_COMMAND = "openURL"


def rewrite_loopback_host(url: str, host: str) -> str:
    """Point a loopback stream URL at a host the remote player can reach.

    Only a leading ``http://localhost:`` or ``http://127.0.0.1:`` prefix is
    replaced, so the port, path and query stay byte-identical. ``https://``
    URLs, loopback hosts without an explicit port and loopback addresses that
    appear later in the string pass through untouched.

    Examples:
        http://localhost:8080/a.mkv -> http://192.168.1.20:8080/a.mkv
        https://localhost:8080/a.mkv -> https://localhost:8080/a.mkv
    """
    for prefix in LOOPBACK_PREFIXES:
        if url.startswith(prefix):
            return f"http://{host}:{url[len(prefix):]}"
    return url


def normalize_url(url: str, safe: str = URL_SAFE_CHARS) -> str:
    """Collapse single- or double-encoded input into one canonical encoding.

    The URL is percent-decoded once, then percent-encoded once with ``safe``
    kept literal. A URL that is already canonical comes back unchanged.
    """
    return quote(unquote(url), safe=safe)


def build_open_command(url: str, command_type: str = OPEN_URL_COMMAND) -> str:
    """Serialize the control command that asks the remote player to open ``url``."""
    return json.dumps({"type": command_type, "url": url})


def normalize_and_build_command(
    url: str,
    safe: str = URL_SAFE_CHARS,
    command_type: str = OPEN_URL_COMMAND,
) -> NormalizedCommand:
    """Normalize ``url`` and build its control payload as one step.

    Raises:
        NormalizationError: If encoding fails or either output is empty
    """
    try:
        canonical = normalize_url(url, safe=safe)
        payload = build_open_command(canonical, command_type) if canonical else ""
    except (UnicodeError, ValueError) as e:
        logging.getLogger("urls").debug(f"normalization of {url!r} failed: {e!r}")
        raise NormalizationError("Malformed stream: URL normalization failed.") from e

    return NormalizedCommand(url=canonical, payload=payload)
