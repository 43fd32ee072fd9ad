# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import json
import logging
import os
import shlex
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar

import tomllib
import yaml
from dotenv import dotenv_values

from .exceptions import ConfigurationError
from .utils.helpers import mask


DEFAULT_CONFIG: dict[str, Any] = {
    "remote": {
        "host": "",  # HTTP host[:port] of the remote VLC bridge, used for the reachability probe
        "ws_url": "",  # empty -> ws://<remote.host>
    },
    "stream": {
        # LAN address of this machine as seen from the remote player
        "host": "",
    },
    "local": {
        "command": "flatpak run org.videolan.VLC --one-instance",
    },
    "probe": {
        "connect_timeout": 0.3,
        "timeout": 0.8,
    },
    "control": {
        "transport": "websockets",  # "websockets" | "websocat"
        "timeout": 5.0,
        "command_type": "openURL",
        "error_markers": ["invalid request", "error", "failed"],
        "websocat": "websocat",
    },
    "normalize": {
        "safe_chars": ":/%?=&",
    },
    "log": {
        "verbosity": 0,  # 0=off, 1=info, 2=debug
        "dir": "~/.local/logs/",
        "file": "",  # empty -> <log.dir>/hayase-vlc-bridge.log
    },
}

# Environment / .env keys and the config paths they override
ENV_KEYS: dict[str, str] = {
    "REMOTE_HOST": "remote.host",
    "WS_URL": "remote.ws_url",
    "STREAM_HOST": "stream.host",
    "VLC_LOCAL_CMD": "local.command",
    "LOG_VERBOSITY": "log.verbosity",
    "LOG_DIR": "log.dir",
    "LOG_FILE": "log.file",
}

ENV_FILE_VAR = "HAYASE_ENV_FILE"

LOG_FILE_NAME = "hayase-vlc-bridge.log"

TRANSPORTS = ("websockets", "websocat")

_PLACEHOLDERS = {"CHANGEME", "CHANGE_ME", "REPLACE_ME"}


def load_config_file(path: str) -> dict[str, Any]:
    """Load configuration from a file (YAML, TOML, or JSON)."""
    logger = logging.getLogger("config")
    path_obj = Path(path)
    ext = path_obj.suffix.lower()

    if not path_obj.exists():
        return {}

    try:
        if ext in (".yaml", ".yml"):
            with path_obj.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

        elif ext == ".toml":
            with path_obj.open("rb") as f:
                data = tomllib.load(f) or {}

        elif ext == ".json":
            with path_obj.open(encoding="utf-8") as f:
                data = json.load(f) or {}

        else:
            logger.warning(f"Unknown config extension: {ext}")
            return {}

    except Exception as e:
        logger.warning(f"Failed to load {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring {path}: top level is not a mapping")
        return {}
    return data


def load_env_file(path: str | None) -> dict[str, str]:
    """Read KEY=VALUE pairs from a .env file.

    The file is parsed as data, never executed. ``${VAR}`` references are
    expanded by python-dotenv.
    """
    if not path or not Path(path).is_file():
        return {}
    return {k: v for k, v in dotenv_values(path).items() if v is not None}


def default_env_file() -> str:
    return str(Path.cwd() / ".env")


def deep_update(dst: dict[str, Any], src: dict[str, Any]) -> dict[str, Any]:
    """Deep merge configuration dictionaries."""
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            deep_update(dst[k], v)
        else:
            dst[k] = v
    return dst


def _set_path(cfg: dict[str, Any], key: str, value: Any) -> None:
    keys = key.split(".")
    target = cfg
    for k in keys[:-1]:
        target = target.setdefault(k, {})
    target[keys[-1]] = value


def apply_env_overrides(cfg: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    """Override config values from environment-style variables."""
    for name, key in ENV_KEYS.items():
        if name in env:
            _set_path(cfg, key, env[name])
    return cfg


def load_config(
    path: str | None = None,
    env_file: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Load configuration: defaults, then config file, then environment, then .env.

    Values from the .env file win over the process environment, the same way
    sourcing the file in a shell would.
    """
    cfg = json.loads(json.dumps(DEFAULT_CONFIG))  # Deep copy

    if path:
        deep_update(cfg, load_config_file(path))

    environ = os.environ if environ is None else environ
    env_file = env_file or environ.get(ENV_FILE_VAR) or default_env_file()

    apply_env_overrides(cfg, environ)
    apply_env_overrides(cfg, load_env_file(env_file))
    cfg["env_file"] = env_file

    return cfg


class Config:
    """Configuration singleton."""

    _instance: ClassVar["Config | None"] = None
    _config: ClassVar[dict[str, Any]] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def load(
        cls,
        path: str | None = None,
        env_file: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Load configuration from file and environment."""
        cls._config = load_config(path, env_file=env_file, environ=environ)

    @classmethod
    def get(cls, key: str | None = None) -> Any:
        """Get configuration value by key path (e.g., 'remote.host')."""
        if key is None:
            return cls._config

        keys = key.split(".")
        value = cls._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                raise KeyError(f"Configuration key not found: {key}")

        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value by key path."""
        _set_path(self._config, key, value)

    def update(self, updates: dict[str, Any]) -> None:
        """Update configuration with dictionary."""
        deep_update(self._config, updates)


def _is_placeholder(value: str) -> bool:
    v = value.strip()
    if not v:
        return True
    if v.startswith("<") and v.endswith(">"):
        return True
    return v.upper() in _PLACEHOLDERS


def _parse_verbosity(value: Any) -> int:
    try:
        verbosity = int(str("" if value is None else value).strip() or 0)
    except ValueError:
        raise ConfigurationError(f"LOG_VERBOSITY must be 0, 1 or 2 (got {value!r}).", field="LOG_VERBOSITY") from None
    return max(0, min(verbosity, 2))


def _setting(config: Config, key: str) -> Any:
    try:
        return config.get(key)
    except KeyError:
        raise ConfigurationError(f"{key} is missing from the configuration.", field=key) from None


def _text(config: Config, key: str) -> str:
    """String setting; an empty value falls back to the built-in default."""
    value = _setting(config, key)
    text = "" if value is None else str(value).strip()
    if not text:
        default = DEFAULT_CONFIG
        for k in key.split("."):
            default = default[k]
        text = str(default)
    return text


def _seconds(config: Config, key: str) -> float:
    value = _setting(config, key)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be a number of seconds (got {value!r}).", field=key) from None


def _markers(config: Config) -> tuple[str, ...]:
    markers = _setting(config, "control.error_markers") or []
    if isinstance(markers, str):
        markers = [markers]
    if not isinstance(markers, (list, tuple)):
        raise ConfigurationError(
            f"control.error_markers must be a list of strings (got {markers!r}).",
            field="control.error_markers",
        )
    return tuple(str(m) for m in markers if str(m))


@dataclass(frozen=True)
class BridgeConfig:
    """Resolved, read-only configuration for one invocation."""

    remote_host: str
    ws_url: str
    stream_host: str
    local_command_line: str
    log_verbosity: int
    log_dir: str
    log_file: str
    probe_connect_timeout: float = 0.3
    probe_timeout: float = 0.8
    control_transport: str = "websockets"
    control_timeout: float = 5.0
    command_type: str = "openURL"
    error_markers: tuple[str, ...] = ("invalid request", "error", "failed")
    websocat_binary: str = "websocat"
    safe_chars: str = ":/%?=&"
    env_file: str = ""

    @classmethod
    def from_config(cls, config: Config) -> "BridgeConfig":
        """Build the typed record from the loaded configuration.

        Defaults derived from other values are filled in here: the WebSocket
        URL from the remote host, the log file from the log directory.
        """
        remote_host = _text(config, "remote.host")
        ws_url = _text(config, "remote.ws_url") or f"ws://{remote_host}"

        # Empty LOG_DIR / VLC_LOCAL_CMD / LOG_VERBOSITY mean "use the default"
        log_dir = _text(config, "log.dir").rstrip("/") + "/"
        log_file = _text(config, "log.file") or f"{log_dir}{LOG_FILE_NAME}"

        return cls(
            remote_host=remote_host,
            ws_url=ws_url,
            stream_host=_text(config, "stream.host"),
            local_command_line=_text(config, "local.command"),
            log_verbosity=_parse_verbosity(_setting(config, "log.verbosity")),
            log_dir=log_dir,
            log_file=log_file,
            probe_connect_timeout=_seconds(config, "probe.connect_timeout"),
            probe_timeout=_seconds(config, "probe.timeout"),
            control_transport=_text(config, "control.transport").lower(),
            control_timeout=_seconds(config, "control.timeout"),
            command_type=_text(config, "control.command_type"),
            error_markers=_markers(config),
            websocat_binary=_text(config, "control.websocat"),
            safe_chars=_text(config, "normalize.safe_chars"),
            env_file=str(config.get().get("env_file") or ""),
        )

    @property
    def local_command(self) -> list[str]:
        """Local player argv, split the way a shell would (quotes preserved)."""
        return shlex.split(self.local_command_line)

    def validate(self) -> None:
        """Check required values once, before any playback decision.

        Raises:
            ConfigurationError: Naming the first missing or unusable value
        """
        required = (
            ("REMOTE_HOST", self.remote_host),
            ("STREAM_HOST", self.stream_host),
            ("LOG_DIR", self.log_dir.rstrip("/")),
        )
        for name, value in required:
            if _is_placeholder(value):
                raise ConfigurationError(
                    f"{name} is not configured (empty). Set it in .env or in the config file.",
                    field=name,
                )

        if _is_placeholder(self.ws_url) or self.ws_url.rstrip("/") in ("ws:", "wss:"):
            raise ConfigurationError("WS_URL is empty. Set it in .env or in the config file.", field="WS_URL")

        try:
            command = self.local_command
        except ValueError as e:
            raise ConfigurationError(f"VLC_LOCAL_CMD cannot be parsed: {e}.", field="VLC_LOCAL_CMD") from e
        if not command:
            raise ConfigurationError("VLC_LOCAL_CMD is empty. Set it in .env or in the config file.", field="VLC_LOCAL_CMD")

        if self.control_transport not in TRANSPORTS:
            raise ConfigurationError(
                f"Unknown control transport '{self.control_transport}' (expected one of {', '.join(TRANSPORTS)}).",
                field="control.transport",
            )

        if self.probe_timeout <= 0 or self.probe_connect_timeout <= 0 or self.control_timeout <= 0:
            raise ConfigurationError("Timeouts must be greater than zero.", field="timeout")

    def masked_snapshot(self) -> list[str]:
        """Config dump for DEBUG logs; every value except the verbosity is masked."""
        return [
            "=" * 51,
            "External variables:",
            f"  ENV_FILE      = {mask(self.env_file)}",
            f"  LOG_VERBOSITY = {self.log_verbosity}",
            f"  LOG_DIR       = {mask(self.log_dir)}",
            f"  LOG_FILE      = {mask(self.log_file)}",
            f"  REMOTE_HOST   = {mask(self.remote_host)}",
            f"  WS_URL        = {mask(self.ws_url)}",
            f"  STREAM_HOST   = {mask(self.stream_host)}",
            f"  VLC_LOCAL_CMD = {mask(self.local_command_line)}",
            "=" * 51,
        ]
