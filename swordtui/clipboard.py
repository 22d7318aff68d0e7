"""System clipboard writes through the platform's copy command."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys

logger = logging.getLogger(__name__)

CLIPBOARD_TIMEOUT_SECONDS = 2.0


def clipboard_commands() -> list[list[str]]:
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if os.name == "nt":
        return [["clip"]]
    return [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]


def copy_text_to_clipboard(text: str) -> bool:
    """Best-effort clipboard copy across macOS, Windows, and common Linux tools."""
    if not text:
        return False

    for command in clipboard_commands():
        if shutil.which(command[0]) is None:
            continue
        try:
            proc = subprocess.run(
                command,
                input=text,
                text=True,
                check=False,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=CLIPBOARD_TIMEOUT_SECONDS,
            )
        except subprocess.TimeoutExpired:
            logger.debug("Clipboard command %s timed out", command[0])
            continue
        except OSError as exc:
            logger.debug("Clipboard command %s failed: %s", command[0], exc)
            continue
        if proc.returncode == 0:
            return True
    logger.debug("No clipboard command accepted the text")
    return False


__all__ = ["clipboard_commands", "copy_text_to_clipboard"]
