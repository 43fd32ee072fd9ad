# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

import argparse
import asyncio
import logging
import sys

from . import __version__
from .config import BridgeConfig, Config
from .exceptions import ConfigurationError
from .playback import DecisionEngine, Disposition
from .utils.logfile import begin_block, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vlc-bridge",
        description="Send a stream URL to a remote VLC bridge, falling back to local VLC.",
    )
    parser.add_argument("url", nargs="*", help="Stream URL (several arguments are joined with spaces)")
    parser.add_argument("--config", default=None, help="Path to YAML/TOML/JSON config file")
    parser.add_argument("--env-file", default=None, help="Path to a .env file (default: $HAYASE_ENV_FILE or ./.env)")
    parser.add_argument(
        "--log-verbosity",
        default=None,
        type=int,
        choices=[0, 1, 2],
        help="0=off, 1=info, 2=debug (overrides config and .env)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def report_config(config: BridgeConfig, verbosity: int) -> None:
    """Log the loaded configuration: masked dump at debug, one line at info."""
    logger = logging.getLogger("config")
    if verbosity >= 2:
        lines = config.masked_snapshot()
        for line in lines:
            logger.debug(line)
        # Also on stderr, in case the file can't be written
        print("\n".join(lines), file=sys.stderr)
    elif verbosity == 1:
        logger.info("✓ External variables loaded: OK.")


def main(argv: list[str] | None = None) -> int:
    """Main entry point: one invocation routes one stream URL."""
    args = build_parser().parse_args(argv)

    # Load configuration
    config = Config()
    config.load(args.config, env_file=args.env_file)
    if args.log_verbosity is not None:
        config.set("log.verbosity", args.log_verbosity)

    try:
        bridge_config = BridgeConfig.from_config(config)
        bridge_config.validate()
    except ConfigurationError as e:
        # Logging is not set up yet: LOG_DIR itself may be the problem
        print(f"ERROR: {e.reason}", file=sys.stderr)
        return 1

    # Setup logging
    verbosity = setup_logging(bridge_config.log_verbosity, bridge_config.log_file, bridge_config.log_dir)
    logger = logging.getLogger("main")

    begin_block(__version__)
    report_config(bridge_config, verbosity)
    logger.info("✓ Configuration valid.")

    engine = DecisionEngine(bridge_config)
    disposition: Disposition = asyncio.run(engine.decide(args.url))
    return engine.conclude(disposition)


def run():
    """Entry point for setuptools console scripts."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logging.getLogger("main").info("Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    run()
