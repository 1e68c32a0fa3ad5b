"""Data models and errors used by the install service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from services.install.constants import BACKUP_PREFIX, BIN_DIRNAME


@dataclass(frozen=True)
class ReleaseReference:
    """The release requested by the user; ``tag`` of ``None`` means latest."""

    tag: str | None = None

    def describe(self) -> str:
        return self.tag if self.tag else "@latest"


@dataclass(frozen=True)
class ResolvedRelease:
    """Download location and tag of the release asset for this platform."""

    url: str
    tag: str

    @property
    def version(self) -> str:
        return self.tag[1:] if self.tag.startswith("v") else self.tag


@dataclass(frozen=True)
class PlatformProfile:
    """Per-operating-system naming of the release asset and binary."""

    name: str
    is_windows: bool
    asset_filename: str
    archive_suffix: str
    binary_name: str

    @property
    def backup_name(self) -> str:
        return f"{BACKUP_PREFIX}{self.binary_name}"


@dataclass(frozen=True)
class InstallPaths:
    """Filesystem locations touched by an installation."""

    install_dir: Path
    bin_dir: Path
    binary_path: Path
    backup_binary_path: Path
    integration_target: Path

    @classmethod
    def for_profile(
        cls, install_dir: Path, profile: PlatformProfile, link_dir: Path
    ) -> "InstallPaths":
        bin_dir = install_dir / BIN_DIRNAME
        if profile.is_windows:
            integration_target = bin_dir
        else:
            integration_target = link_dir / profile.binary_name
        return cls(
            install_dir=install_dir,
            bin_dir=bin_dir,
            binary_path=bin_dir / profile.binary_name,
            backup_binary_path=bin_dir / profile.backup_name,
            integration_target=integration_target,
        )


class PathState(str, Enum):
    """Outcome of probing a filesystem entry without following links."""

    MISSING = "missing"
    PRESENT = "present"


class InstallError(RuntimeError):
    """Raised when the binary cannot be resolved, installed or verified."""


class InvalidReleaseTagError(InstallError):
    """The requested tag is not of the form ``vMAJOR.MINOR.PATCH``."""


class ResolutionError(InstallError):
    """The release page or asset could not be located."""


class UnsupportedPlatformError(ResolutionError):
    """No release asset is published for this operating system."""


class AssetNotFoundError(ResolutionError):
    """The release page carries no usable link for this platform's asset."""


class RedirectLimitError(ResolutionError):
    """A URL did not settle on a successful response within the request bound."""


class TransferError(InstallError):
    """The downloaded asset could not be written to disk."""


class ExtractionError(InstallError):
    """The archive could not be expanded into the binary directory."""

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class IntegrationError(InstallError):
    """The binary could not be made reachable from the user's shell."""


class VerificationError(InstallError):
    """The installed binary could not be run."""


class VersionMismatchError(VerificationError):
    """The installed binary reports a different version than was resolved."""
