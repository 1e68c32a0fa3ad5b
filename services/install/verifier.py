"""Confirm the freshly installed binary runs and reports the expected version."""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Callable, Sequence

from services.install.constants import (
    VERIFY_MAX_ATTEMPTS,
    VERIFY_POLL_INTERVAL,
    VERSION_FLAG,
    VERSION_OUTPUT_MIN_BYTES,
    VERSION_OUTPUT_PREFIX_BYTES,
)
from services.install.models import VerificationError, VersionMismatchError
from services.install.versioning import version_pattern


_LOGGER = logging.getLogger(__name__)

__all__ = ["Verifier", "VersionReport"]

Spawner = Callable[[Sequence[str]], "subprocess.Popen[bytes]"]

_INSTALLED_VERSION_RE = re.compile(r"\b(\d+\.\d+\.\d+)\b")


def _spawn(args: Sequence[str]) -> "subprocess.Popen[bytes]":
    return subprocess.Popen(
        list(args),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
    )


class VersionReport:
    """Exit status and the bounded output prefix of a ``--version`` run."""

    def __init__(self, returncode: int, output: bytes) -> None:
        self.returncode = returncode
        self.output = output

    @property
    def text(self) -> str:
        return self.output.decode("utf-8", errors="replace")


class Verifier:
    """Run ``<binary> --version`` with a bounded wait and check its output."""

    def __init__(
        self,
        binary_path: Path,
        *,
        spawner: Spawner = _spawn,
        max_attempts: int = VERIFY_MAX_ATTEMPTS,
        poll_interval: float = VERIFY_POLL_INTERVAL,
    ) -> None:
        self._binary_path = binary_path
        self._spawner = spawner
        self._max_attempts = max_attempts
        self._poll_interval = poll_interval

    def check(self, expected_tag: str) -> None:
        report = self.run_version()
        if report.returncode != 0:
            raise VerificationError(f"Test run failed ({self._binary_path} exited with {report.returncode})")
        if len(report.output) < VERSION_OUTPUT_MIN_BYTES:
            raise VersionMismatchError(
                f"Version mismatch: {self._binary_path} printed too little output ({report.text!r})"
            )
        if not version_pattern(expected_tag).search(report.text):
            raise VersionMismatchError(
                f"Version mismatch: expected {expected_tag}, got {report.text.strip()!r}"
            )
        _LOGGER.debug("Installed binary reports %s", report.text.strip())

    def installed_version(self) -> str | None:
        """Return the version of the binary currently in place, if it runs."""

        if not self._binary_path.is_file():
            return None
        try:
            report = self.run_version()
        except VerificationError as exc:
            _LOGGER.debug("Could not query existing binary: %s", exc)
            return None
        if report.returncode != 0:
            return None
        match = _INSTALLED_VERSION_RE.search(report.text)
        return match.group(1) if match else None

    def run_version(self) -> VersionReport:
        args = (str(self._binary_path), VERSION_FLAG)
        try:
            process = self._spawner(args)
        except OSError as exc:
            raise VerificationError(f"Test run failed: unable to start {self._binary_path}: {exc}") from exc

        for attempt in range(1, self._max_attempts + 1):
            try:
                stdout, _ = process.communicate(timeout=self._poll_interval)
                break
            except subprocess.TimeoutExpired:
                _LOGGER.debug("Waiting for %s (attempt %s/%s)", args[0], attempt, self._max_attempts)
        else:
            process.kill()
            process.communicate()
            raise VerificationError(
                f"Test run failed: {self._binary_path} did not exit within "
                f"{self._max_attempts * self._poll_interval:g}s"
            )

        return VersionReport(process.returncode, (stdout or b"")[:VERSION_OUTPUT_PREFIX_BYTES])
