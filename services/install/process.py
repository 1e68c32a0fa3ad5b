"""Run external tools used during installation."""

from __future__ import annotations

import logging
import subprocess
from typing import Callable, Sequence


_LOGGER = logging.getLogger(__name__)

__all__ = ["CommandRunner", "run_command"]

CommandRunner = Callable[[Sequence[str]], int]


def run_command(args: Sequence[str]) -> int:
    """Run ``args`` to completion and return its exit code.

    Raises ``OSError`` when the tool cannot be launched at all.
    """

    _LOGGER.debug("Running %s", " ".join(args))
    completed = subprocess.run(
        list(args),
        stdin=subprocess.DEVNULL,
        capture_output=True,
        text=True,
        check=False,
    )
    if completed.stdout.strip():
        _LOGGER.debug("%s stdout: %s", args[0], completed.stdout.strip())
    if completed.stderr.strip():
        _LOGGER.debug("%s stderr: %s", args[0], completed.stderr.strip())
    return completed.returncode
