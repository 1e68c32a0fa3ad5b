"""Public API for the install service package."""

from __future__ import annotations

from services.install.builder import build_install_service
from services.install.config import InstallerConfig
from services.install.constants import (
    DENO_REPO_URL,
    HTTP_TIMEOUT_ENV,
    INSTALL_ROOT_ENV,
    LINK_DIR_ENV,
    LOG_FILE_ENV,
    REPO_URL_ENV,
    WINDOWS_UNZIP_ENV,
)
from services.install.models import (
    AssetNotFoundError,
    ExtractionError,
    InstallError,
    InstallPaths,
    IntegrationError,
    InvalidReleaseTagError,
    PlatformProfile,
    RedirectLimitError,
    ReleaseReference,
    ResolutionError,
    ResolvedRelease,
    TransferError,
    UnsupportedPlatformError,
    VerificationError,
    VersionMismatchError,
)
from services.install.service import InstallService

__all__ = [
    "DENO_REPO_URL",
    "HTTP_TIMEOUT_ENV",
    "INSTALL_ROOT_ENV",
    "LINK_DIR_ENV",
    "LOG_FILE_ENV",
    "REPO_URL_ENV",
    "WINDOWS_UNZIP_ENV",
    "AssetNotFoundError",
    "ExtractionError",
    "InstallError",
    "InstallPaths",
    "IntegrationError",
    "InvalidReleaseTagError",
    "PlatformProfile",
    "RedirectLimitError",
    "ReleaseReference",
    "ResolutionError",
    "ResolvedRelease",
    "TransferError",
    "UnsupportedPlatformError",
    "VerificationError",
    "VersionMismatchError",
    "InstallService",
    "InstallerConfig",
    "build_install_service",
]
