from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from services.install.models import VerificationError, VersionMismatchError
from services.install.verifier import Verifier
from tests.unit.install_test_utils import requires_posix, write_version_script


class HangingProcess:
    """Popen stand-in whose ``communicate`` never finishes in time."""

    def __init__(self) -> None:
        self.returncode: int | None = None
        self.attempts = 0
        self.killed = False

    def communicate(self, timeout: float | None = None):
        if self.killed:
            return b"", b""
        self.attempts += 1
        raise subprocess.TimeoutExpired("deno", timeout)

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9


@requires_posix
def test_check_accepts_matching_version(tmp_path: Path) -> None:
    binary = write_version_script(tmp_path / "deno", "deno 1.2.3 (release, x86_64-unknown-linux-gnu)")

    Verifier(binary).check("v1.2.3")


@requires_posix
def test_check_rejects_different_version(tmp_path: Path) -> None:
    binary = write_version_script(tmp_path / "deno", "deno 1.2.4 (release, x86_64-unknown-linux-gnu)")

    with pytest.raises(VersionMismatchError, match="Version mismatch"):
        Verifier(binary).check("v1.2.3")


@requires_posix
def test_check_does_not_accept_longer_version_with_same_prefix(tmp_path: Path) -> None:
    binary = write_version_script(tmp_path / "deno", "deno 1.2.34 (release, x86_64-unknown-linux-gnu)")

    with pytest.raises(VersionMismatchError):
        Verifier(binary).check("v1.2.3")


@requires_posix
def test_check_reports_failed_test_run(tmp_path: Path) -> None:
    binary = write_version_script(tmp_path / "deno", "deno 1.2.3 (release, x86_64)", exit_code=3)

    with pytest.raises(VerificationError, match="Test run failed"):
        Verifier(binary).check("v1.2.3")


@requires_posix
def test_check_rejects_too_little_output(tmp_path: Path) -> None:
    binary = write_version_script(tmp_path / "deno", "1.2.3")

    with pytest.raises(VersionMismatchError, match="too little output"):
        Verifier(binary).check("v1.2.3")


def test_check_reports_missing_binary(tmp_path: Path) -> None:
    with pytest.raises(VerificationError, match="unable to start"):
        Verifier(tmp_path / "missing-deno").check("v1.2.3")


def test_run_version_is_bounded(tmp_path: Path) -> None:
    process = HangingProcess()
    verifier = Verifier(tmp_path / "deno", spawner=lambda args: process, max_attempts=3, poll_interval=0.01)  # type: ignore[arg-type,return-value]

    with pytest.raises(VerificationError, match="did not exit"):
        verifier.run_version()

    assert process.attempts == 3
    assert process.killed


@requires_posix
def test_installed_version_reads_existing_binary(tmp_path: Path) -> None:
    binary = write_version_script(tmp_path / "deno", "deno 1.3.0 (release, x86_64-unknown-linux-gnu)")

    assert Verifier(binary).installed_version() == "1.3.0"


def test_installed_version_is_none_without_binary(tmp_path: Path) -> None:
    assert Verifier(tmp_path / "deno").installed_version() is None


@requires_posix
def test_installed_version_tolerates_unrunnable_binary(tmp_path: Path) -> None:
    binary = tmp_path / "deno"
    binary.write_bytes(b"not a program")

    assert Verifier(binary).installed_version() is None
