# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

from urllib.parse import urlparse


def is_url(value: str) -> bool:
    """Check if a launcher argument looks like a URL (has a scheme separator)."""
    return "://" in value


def is_websocket_url(url: str) -> bool:
    """Check if a URL is WS/WSS."""
    try:
        s = (urlparse(url).scheme or "").lower()
        return s in ("ws", "wss")
    except Exception:
        return False


def mask(value: str | None) -> str:
    """Mask a configuration value, keeping a little context.

    empty -> "<empty>", up to 4 chars -> "****",
    up to 8 chars -> first 2 + "****", else first 4 + "****" + last 2.
    """
    if not value:
        return "<empty>"

    n = len(value)
    if n <= 4:
        return "****"
    if n <= 8:
        return f"{value[:2]}****"
    return f"{value[:4]}****{value[-2:]}"


def shorten(value: str, max_len: int = 160) -> str:
    """Shorten long URLs for INFO logs without losing the beginning and end."""
    if len(value) <= max_len:
        return value
    return f"{value[:120]}…{value[-30:]}"
