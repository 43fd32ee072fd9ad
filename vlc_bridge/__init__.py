# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Send a stream URL to a remote VLC bridge, with local VLC as the fallback."""

__version__ = "1.1.0"
