# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Remote player control: reachability probe, control channels and dispatch."""

from .dispatcher import DEFAULT_ERROR_MARKERS, RemoteDispatcher
from .probe import ReachabilityProber
from .protocol import ControlChannel, ControlChannelFactory
from .websocat import WebsocatControlChannel
from .websocket import WebSocketControlChannel


ControlChannelFactory.register(WebSocketControlChannel.name, WebSocketControlChannel)
ControlChannelFactory.register(WebsocatControlChannel.name, WebsocatControlChannel)


__all__ = [
    "DEFAULT_ERROR_MARKERS",
    "ControlChannel",
    "ControlChannelFactory",
    "ReachabilityProber",
    "RemoteDispatcher",
    "WebSocketControlChannel",
    "WebsocatControlChannel",
]
