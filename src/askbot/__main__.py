"""Command-line entrypoint: ``askbot run`` (default) or ``askbot manifest``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import yaml

from askbot.bot import APP_NAME, AskBot
from askbot.chunker import InvalidConfigurationError
from askbot.commands import ask_command, build_manifest
from askbot.config import (
    DEFAULT_CONFIG_FILENAME,
    BotConfig,
    load_bot_section,
    resolve_config_path,
)

logger = logging.getLogger("askbot")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="askbot",
        description="Slack slash-command bot that relays questions to the model.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"YAML config file (default: $ASKBOT_CONFIG or {DEFAULT_CONFIG_FILENAME})",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    sub = parser.add_subparsers(dest="cmd")
    sub.add_parser("run", help="Connect to Slack and serve commands (default)")
    manifest = sub.add_parser("manifest", help="Print the Slack app manifest as YAML")
    manifest.add_argument(
        "-o", "--output", type=Path, default=None, help="Write to file instead"
    )
    return parser


def _write_manifest(config_path: Path | None, output: Path | None) -> int:
    bot_cfg = load_bot_section(resolve_config_path(config_path))
    command = ask_command(str(bot_cfg.get("command", "/ask")))
    manifest = build_manifest(APP_NAME, [command])
    text = yaml.safe_dump(manifest, sort_keys=False)
    if output is None:
        sys.stdout.write(text)
    else:
        output.write_text(text)
        logger.info("Manifest written to %s", output)
    return 0


def _run(config_path: Path | None) -> int:
    try:
        config = BotConfig.from_env(config_path)
    except (ValueError, InvalidConfigurationError) as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Configuration: %s", config.describe())
    bot = AskBot(config=config)
    try:
        bot.start()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        bot.stop()
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for askbot."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    if args.cmd == "manifest":
        return _write_manifest(args.config, args.output)
    return _run(args.config)


if __name__ == "__main__":
    sys.exit(main())
