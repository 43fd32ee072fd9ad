# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Playback request values and the URL rewrite/normalization pipeline."""

from .request import NormalizedCommand, PlaybackRequest
from .urls import (
    LOOPBACK_PREFIXES,
    OPEN_URL_COMMAND,
    URL_SAFE_CHARS,
    build_open_command,
    normalize_and_build_command,
    normalize_url,
    rewrite_loopback_host,
)


__all__ = [
    "LOOPBACK_PREFIXES",
    "OPEN_URL_COMMAND",
    "URL_SAFE_CHARS",
    "NormalizedCommand",
    "PlaybackRequest",
    "build_open_command",
    "normalize_and_build_command",
    "normalize_url",
    "rewrite_loopback_host",
]
