"""
Actions on a course: start `study`, open the directory, copy the path.

`start_study` is fire-and-forget: the command runs in a background thread,
its output is discarded and a failure is only logged.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)

STUDY_COMMAND = "study"

# Tried in order; the first one found on PATH wins.
CLIPBOARD_COMMANDS: list[list[str]] = [
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["pbcopy"],
    ["clip"],
]


def _run_study(cmd: list[str], log: logging.Logger) -> None:
    try:
        proc = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError as e:
        log.error("study failed to start (%s): %s", " ".join(cmd), e)
        return

    if proc.returncode != 0:
        log.warning("study exited with status %s (%s)", proc.returncode, " ".join(cmd))


def start_study(
    code: str,
    log: Optional[logging.Logger] = None,
    command: str = STUDY_COMMAND,
) -> threading.Thread:
    """
    Run `study <code>` in a daemon thread and return the started thread.

    Nothing waits for it. Failures go to `log` (default: this module's logger).
    """
    cmd = [command, code]
    t = threading.Thread(
        target=_run_study,
        args=(cmd, log or logger),
        name=f"study-{code}",
        daemon=True,
    )
    t.start()
    return t


def open_path(path: str | Path) -> bool:
    """
    Open a directory with the platform's file manager.
    """
    target = str(path)
    if sys.platform.startswith("win"):
        cmd = ["explorer.exe", target]
    else:
        cmd = ["open" if sys.platform == "darwin" else "xdg-open", target]

    try:
        subprocess.run(cmd, check=False)
    except OSError as e:
        logger.error("Could not open %s: %s", target, e)
        return False
    return True


def copy_to_clipboard(text: str) -> bool:
    """
    Copy text using the first clipboard tool available on PATH.

    Returns False if no tool is installed or the tool failed.
    """
    for cmd in CLIPBOARD_COMMANDS:
        if shutil.which(cmd[0]) is None:
            continue
        try:
            proc = subprocess.run(cmd, input=text, text=True, encoding="utf-8", check=False)
        except OSError as e:
            logger.warning("Clipboard command %s failed: %s", cmd[0], e)
            continue
        return proc.returncode == 0

    logger.warning("No clipboard tool found (tried: %s)", ", ".join(c[0] for c in CLIPBOARD_COMMANDS))
    return False


@dataclass
class HostActions:
    """
    The side-effecting actions the CLI and the interactive picker use.

    Tests replace the callables with fakes.
    """

    study: Callable[[str], Optional[threading.Thread]] = field(default=start_study)
    open_path: Callable[[Path], bool] = field(default=open_path)
    copy: Callable[[str], bool] = field(default=copy_to_clipboard)
