# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Playback routing: decision engine, dispositions and the local fallback."""

from .disposition import Disposition, DispositionKind
from .engine import DecisionEngine
from .local import FallbackExecutor, HandoffReturnedError


__all__ = [
    "DecisionEngine",
    "Disposition",
    "DispositionKind",
    "FallbackExecutor",
    "HandoffReturnedError",
]
