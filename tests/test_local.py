"""
Tests for the local fallback executor.
"""

from unittest.mock import MagicMock

import pytest

from vlc_bridge.media import PlaybackRequest
from vlc_bridge.playback import FallbackExecutor, HandoffReturnedError


class TestFallbackExecutor:
    """Tests for FallbackExecutor."""

    def test_argv_appends_url(self) -> None:
        """The URL is the last argument after the fixed ones."""
        executor = FallbackExecutor(["flatpak", "run", "org.videolan.VLC", "--one-instance"])
        assert executor.argv("http://localhost:8080/a.mkv") == [
            "flatpak", "run", "org.videolan.VLC", "--one-instance", "http://localhost:8080/a.mkv",
        ]

    def test_hand_off_execs_program(self) -> None:
        """exec gets the program name and the full argv."""
        exec_fn = MagicMock(return_value=None)
        executor = FallbackExecutor(["vlc"], exec_fn=exec_fn)

        with pytest.raises(HandoffReturnedError):
            executor.hand_off(PlaybackRequest("http://localhost:8080/My Show.mkv"))

        exec_fn.assert_called_once_with("vlc", ["vlc", "http://localhost:8080/My Show.mkv"])

    def test_no_code_runs_after_handoff(self) -> None:
        """If exec comes back, hand_off raises instead of returning."""
        executor = FallbackExecutor(["vlc"], exec_fn=lambda file, args: None)

        with pytest.raises(HandoffReturnedError, match="exec of vlc returned"):
            executor.hand_off(PlaybackRequest("http://localhost:8080/a.mkv"))

    def test_exec_failure_propagates(self) -> None:
        """A missing binary surfaces as OSError."""
        executor = FallbackExecutor(["no-such-player"], exec_fn=MagicMock(side_effect=FileNotFoundError()))

        with pytest.raises(FileNotFoundError):
            executor.hand_off(PlaybackRequest("http://localhost:8080/a.mkv"))

    def test_empty_command(self) -> None:
        """An empty command cannot be executed."""
        with pytest.raises(ValueError):
            FallbackExecutor([])
