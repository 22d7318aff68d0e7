"""Command-line front door for sword-tui.

Parses CLI options, sets up logging, and dispatches into the interactive
reader runtime.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from . import __version__
from .log import configure_logging
from .runtime import run_app
from .ui_theme import available_theme_names


def _translation_code(value: str) -> str:
    """argparse type for translation short codes such as ``KJV``."""
    code = value.strip().upper()
    if not code or not code.replace("-", "").replace("_", "").isalnum():
        raise argparse.ArgumentTypeError(f"invalid translation code: {value!r}")
    return code


def _theme_name(value: str) -> str:
    names = available_theme_names()
    candidate = value.strip().lower()
    if candidate not in names:
        raise argparse.ArgumentTypeError(f"unknown theme {value!r} (choose from {', '.join(names)})")
    return candidate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sword-tui",
        description="Read the Bible in the terminal.",
    )
    parser.add_argument(
        "--translation",
        type=_translation_code,
        default=None,
        help="Translation short code to open (default: last used, else NLT).",
    )
    parser.add_argument(
        "--theme",
        type=_theme_name,
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write a log to this file.")
    parser.add_argument("--debug", action="store_true", help="Log debug messages (to --log-file or the default log).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the reader."""
    args = build_parser().parse_args(argv)
    try:
        configure_logging(args.log_file, debug=args.debug)
    except OSError as exc:
        raise SystemExit(f"Cannot open log file: {exc}") from exc
    run_app(translation=args.translation, theme=args.theme, no_color=args.no_color)


if __name__ == "__main__":
    main()
