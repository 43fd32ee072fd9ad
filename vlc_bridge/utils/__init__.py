# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Utility modules for logging and string helpers."""

from .helpers import is_url, is_websocket_url, mask, shorten
from .logfile import BridgeFormatter, begin_block, finish_block, report_error, setup_logging


__all__ = [
    # Logging
    "BridgeFormatter",
    "begin_block",
    "finish_block",
    # Helpers
    "is_url",
    "is_websocket_url",
    "mask",
    "report_error",
    "setup_logging",
    "shorten",
]
