# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

"""Decision engine: pick remote or local playback for one stream URL.

The steps run in a fixed order:

    validate -> rewrite -> normalize -> probe -> channel check -> dispatch -> classify

The first three are local and fail with ``BridgeAbortError``: the input itself
is broken, so no destination would help. The rest depend on the network and
fail with ``RemoteUnavailableError``: the stream is still playable locally.
Each step is awaited before the next one starts, so the probe always finishes
before anything is sent.
"""

import logging
from collections.abc import Sequence

from ..config import BridgeConfig
from ..control import ControlChannelFactory, ReachabilityProber, RemoteDispatcher
from ..exceptions import BridgeAbortError, InvalidInputError, RemoteUnavailableError
from ..media.request import NormalizedCommand, PlaybackRequest
from ..media.urls import normalize_and_build_command, rewrite_loopback_host
from ..utils.helpers import shorten
from ..utils.logfile import finish_block, report_error
from .disposition import Disposition, DispositionKind
from .local import FallbackExecutor


class DecisionEngine:
    """Route one playback request to the remote player or the local one."""

    def __init__(
        self,
        config: BridgeConfig,
        prober: ReachabilityProber | None = None,
        dispatcher: RemoteDispatcher | None = None,
        executor: FallbackExecutor | None = None,
    ):
        self.config = config
        self.logger = logging.getLogger("engine")

        if prober is None:
            prober = ReachabilityProber(
                config.remote_host,
                connect_timeout=config.probe_connect_timeout,
                total_timeout=config.probe_timeout,
            )
        if dispatcher is None:
            options = {"binary": config.websocat_binary} if config.control_transport == "websocat" else {}
            channel = ControlChannelFactory.create(
                config.control_transport, config.ws_url, config.control_timeout, **options
            )
            dispatcher = RemoteDispatcher(channel, config.error_markers)
        if executor is None:
            executor = FallbackExecutor(config.local_command)

        self.prober = prober
        self.dispatcher = dispatcher
        self.executor = executor

    async def decide(self, args: Sequence[str]) -> Disposition:
        """Run every step and return the one disposition reached."""
        request = None
        try:
            request = self._retrieve(args)
            command = self._prepare(request)
        except BridgeAbortError as e:
            return Disposition.abort(e.reason, request)

        try:
            await self._play_remote(command)
        except RemoteUnavailableError as e:
            return Disposition.fallback(e.reason, request)

        return Disposition.remote_success(request)

    def _retrieve(self, args: Sequence[str]) -> PlaybackRequest:
        self.logger.info("• Retrieving stream source from Hayase…")

        request = PlaybackRequest.from_args(args)
        self.logger.debug(f"URL(raw)=<{request.raw}>")

        if not request.is_url:
            raise InvalidInputError("Invalid stream source: argument is not a valid URL.")

        self.logger.info("✓ Stream source detected.")
        return request

    def _prepare(self, request: PlaybackRequest) -> NormalizedCommand:
        self.logger.info("• Rewriting URL for Apple TV network access…")
        rewritten = rewrite_loopback_host(request.raw, self.config.stream_host)
        self.logger.debug(f"URL(rewrite-host)=<{rewritten}>")
        self.logger.info("✓ Host rewritten.")

        self.logger.info("• Normalizing URL encoding…")
        command = normalize_and_build_command(
            rewritten,
            safe=self.config.safe_chars,
            command_type=self.config.command_type,
        )
        self.logger.info("✓ Stream parsed.")

        self.logger.info(f"URL(final)=<{shorten(command.url)}>")
        self.logger.debug(f"URL(final-full)=<{command.url}>")
        return command

    async def _play_remote(self, command: NormalizedCommand) -> None:
        self.logger.info("• Checking remote VLC server availability…")
        await self.prober.probe()
        self.logger.info("✓ Remote VLC reachable.")

        channel = self.dispatcher.channel
        self.logger.info(f"• Checking {channel.name} control channel…")
        self.dispatcher.ensure_available()
        self.logger.info(f"✓ {channel.name} detected.")

        self.logger.info("• Sending stream to remote VLC via WebSocket…")
        await self.dispatcher.dispatch(command)

    def conclude(self, disposition: Disposition) -> int:
        """Act on the disposition.

        Returns the exit status for RemoteSuccess and Abort. A fallback
        replaces the process with the local player and does not return unless
        the player could not be executed.
        """
        if disposition.kind is DispositionKind.REMOTE_SUCCESS:
            self.logger.info("✓ Command successfully sent to remote VLC.")
            finish_block()
            return 0

        if disposition.kind is DispositionKind.ABORT:
            report_error(disposition.reason, self.logger)
            finish_block()
            return 1

        self.logger.warning(f"⚠ {disposition.reason}")
        self.logger.warning("⚠ Fallback: launching local VLC.")
        self.logger.debug(f"URL(local)=<{disposition.request.raw}>")
        finish_block()

        try:
            self.executor.hand_off(disposition.request)
        except OSError as e:
            report_error(f"Cannot launch local player ({self.executor.command[0]}): {e}", self.logger)
            return 127
