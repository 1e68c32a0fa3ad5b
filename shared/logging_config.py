"""Central logging configuration for the installer command line.

Console records carry the fixed ``[deno-install <level>]`` prefix: records
below WARNING are written to stdout and everything else to stderr.  An
optional diagnostic log file can be requested through ``DENO_INSTALL_LOG_FILE``
(see :class:`services.install.config.InstallerConfig`); it records DEBUG
output and redacts the home directory passed in by the caller, and the user
name it ends in, so the file can be attached to bug reports.

Repeated calls to :func:`ensure_installer_logging` are no-ops, which keeps the
CLI safe to invoke several times from tests.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from enum import Enum
from pathlib import Path
from typing import TextIO

_CONFIGURED = False
_HANDLER_TAG = "_deno_install_logging_handler"
CONSOLE_PREFIX = "deno-install"

USER_PLACEHOLDER = "<user>"
USER_HOME_PLACEHOLDER = "<user_home>"


class LogVerbosity(str, Enum):
    """Console verbosity levels selectable from the command line."""

    QUIET = "quiet"
    INFO = "info"
    VERBOSE = "verbose"


_VERBOSITY_LEVELS: dict[LogVerbosity, int] = {
    LogVerbosity.QUIET: logging.WARNING,
    LogVerbosity.INFO: logging.INFO,
    LogVerbosity.VERBOSE: logging.DEBUG,
}


def _build_redaction_patterns(home: Path | None) -> list[tuple[re.Pattern[str], str]]:
    if home is None:
        return []
    home_text = os.path.normpath(str(home))
    if home_text in {os.sep, ".", ""}:
        return []

    flags = re.IGNORECASE if os.name == "nt" else 0
    patterns: list[tuple[re.Pattern[str], str]] = [
        (re.compile(re.escape(variant), flags), USER_HOME_PLACEHOLDER)
        for variant in sorted({home_text, home_text.replace("\\", "/")}, key=len, reverse=True)
    ]
    username = home.name.strip()
    if username and any(character.isalnum() for character in username):
        patterns.append((re.compile(rf"(?<!\w){re.escape(username)}(?!\w)", re.IGNORECASE), USER_PLACEHOLDER))
    return patterns


def sanitize_text(message: str, home: Path | None) -> str:
    """Replace ``home`` and the user name it ends in with placeholders."""

    return _apply_patterns(message, _build_redaction_patterns(home))


def _apply_patterns(message: str, patterns: list[tuple[re.Pattern[str], str]]) -> str:
    redacted = message
    for pattern, replacement in patterns:
        redacted = pattern.sub(replacement, redacted)
    return redacted


class _RedactingFormatter(logging.Formatter):
    def __init__(self, fmt: str, *, home: Path | None, datefmt: str | None = None) -> None:
        super().__init__(fmt, datefmt=datefmt)
        self._patterns = _build_redaction_patterns(home)

    def format(self, record: logging.LogRecord) -> str:
        return _apply_patterns(super().format(record), self._patterns)


class ConsoleFormatter(logging.Formatter):
    """Prefix every message with ``[deno-install <level>]``."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return f"[{CONSOLE_PREFIX} {record.levelname.lower()}] {message}"


class _BelowLevelFilter(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._level


def _tag(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG, True)
    return handler


def ensure_installer_logging(
    verbosity: LogVerbosity | str = LogVerbosity.INFO,
    *,
    log_file: Path | None = None,
    home: Path | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> None:
    """Configure the root logger for a CLI run.

    ``home`` is redacted from the log file; a log file that cannot be opened
    is reported as a warning and skipped. Subsequent calls are no-ops until :func:`_reset_for_tests` is invoked.
    """

    global _CONFIGURED

    if _CONFIGURED:
        return

    if isinstance(verbosity, str):
        try:
            verbosity = LogVerbosity(verbosity.lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported log verbosity: {verbosity}") from exc

    console_level = _VERBOSITY_LEVELS[verbosity]
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    console_formatter = ConsoleFormatter("%(message)s")

    out_handler = logging.StreamHandler(stdout or sys.stdout)
    out_handler.setLevel(console_level)
    out_handler.addFilter(_BelowLevelFilter(logging.WARNING))
    out_handler.setFormatter(console_formatter)
    root.addHandler(_tag(out_handler))

    err_handler = logging.StreamHandler(stderr or sys.stderr)
    err_handler.setLevel(max(console_level, logging.WARNING))
    err_handler.setFormatter(console_formatter)
    root.addHandler(_tag(err_handler))

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as exc:
            logging.getLogger(__name__).warning(
                "Unable to write installer log to %s (%s); continuing without it", log_file, exc
            )
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                _RedactingFormatter(
                    "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                    home=home,
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            root.addHandler(_tag(file_handler))
            logging.getLogger(__name__).debug("Writing installer diagnostics to %s", log_file)

    _CONFIGURED = True


def _reset_for_tests() -> None:
    """Remove handlers installed by :func:`ensure_installer_logging`."""

    global _CONFIGURED

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            try:
                handler.close()
            except Exception:  # pragma: no cover - close should rarely fail
                pass

    _CONFIGURED = False
