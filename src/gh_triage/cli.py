"""CLI/bootstrap helpers for the triage application."""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from gh_triage.action_messages import build_actionable_error
from gh_triage.config import ConfigError, get_config_path, load_config
from gh_triage.models import UserConfig

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "GITHUB_TOKEN"

# Rotation limits for the --debug log file
DEBUG_LOG_MAX_BYTES = 5 * 1024 * 1024
DEBUG_LOG_BACKUPS = 3

# Loggers that emit one INFO line per HTTP request
NOISY_LOGGERS = ("httpx", "httpcore")

# --color mode -> (environment variables to set, variables to drop)
_COLOR_ENV: dict[str, tuple[dict[str, str], tuple[str, ...]]] = {
    "never": ({"NO_COLOR": "1"}, ("FORCE_COLOR",)),
    "always": ({"FORCE_COLOR": "1"}, ("NO_COLOR",)),
    "auto": ({}, ("FORCE_COLOR",)),
}


def get_debug_log_path() -> Path:
    """The --debug log file, kept next to config.json."""
    return get_config_path().with_name("debug.log")


def _configure_logging(debug: bool) -> None:
    """Route DEBUG records to a rotating file, or silence logging entirely.

    The TUI owns the terminal, so nothing is ever logged to stderr.
    """
    if not debug:
        logging.disable(logging.CRITICAL)
        return

    log_file = get_debug_log_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=DEBUG_LOG_MAX_BYTES,
        backupCount=DEBUG_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S")
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG)
    # The GitHub client logs each request at DEBUG already
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _configure_color_mode(color_mode: str) -> None:
    """Translate --color into the NO_COLOR/FORCE_COLOR hints Textual reads."""
    set_vars, drop_vars = _COLOR_ENV[color_mode]
    for name in drop_vars:
        os.environ.pop(name, None)
    os.environ.update(set_vars)


def _validate_interactive_tty() -> bool:
    """Whether this terminal can host the full-screen UI."""
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        return False
    return os.environ.get("TERM") != "dumb"


def _read_token() -> str:
    return os.environ.get(TOKEN_ENV_VAR, "").strip()


def main(
    argv: list[str] | None = None,
    *,
    load_config_fn: Callable[[], UserConfig] = load_config,
    read_token_fn: Callable[[], str] = _read_token,
    configure_logging_fn: Callable[[bool], None] = _configure_logging,
    configure_color_mode_fn: Callable[[str], None] = _configure_color_mode,
    validate_interactive_tty_fn: Callable[[], bool] = _validate_interactive_tty,
    app_factory: Callable[..., Any] | None = None,
) -> int:
    """Main entry point. Returns exit code."""
    parser = argparse.ArgumentParser(description="Triage GitHub notifications in a TUI")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Write debug logs to debug.log in the config directory",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output mode for terminal UI (default: auto)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable terminal colors (equivalent to --color never)",
    )
    args = parser.parse_args(argv)

    color_mode = "never" if args.no_color else args.color
    configure_color_mode_fn(color_mode)
    configure_logging_fn(args.debug)
    logger.debug("gh-triage starting, cwd=%s", Path.cwd())

    token = read_token_fn()
    if not token:
        print(
            build_actionable_error(
                "start gh-triage",
                why=f"{TOKEN_ENV_VAR} is not set",
                next_step=f"export {TOKEN_ENV_VAR} with a token that has the notifications "
                "and repo scopes",
            ),
            file=sys.stderr,
        )
        return 1

    try:
        config = load_config_fn()
    except ConfigError as e:
        logger.error("Config error: %s", e)
        print(
            build_actionable_error(
                "load the configuration",
                why=str(e),
                next_step=f"fix or remove {get_config_path()}",
            ),
            file=sys.stderr,
        )
        return 1

    if not validate_interactive_tty_fn():
        print(
            "Error: gh-triage requires an interactive TTY for the full UI.",
            file=sys.stderr,
        )
        print("Next steps:", file=sys.stderr)
        print("  - Run gh-triage directly in a terminal session", file=sys.stderr)
        print("  - Use --help for command documentation", file=sys.stderr)
        return 2

    if app_factory is None:
        from gh_triage.app import TriageApp as _TriageApp

        app_factory = _TriageApp

    app = app_factory(config, token=token)
    app.run()
    return 0


__all__ = [
    "TOKEN_ENV_VAR",
    "get_debug_log_path",
    "_configure_color_mode",
    "_configure_logging",
    "_validate_interactive_tty",
    "main",
]
