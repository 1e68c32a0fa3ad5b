"""Constants shared across the install service modules."""

from __future__ import annotations

DENO_REPO_URL = "https://github.com/denoland/deno"
LATEST_RELEASE_PATH = "releases/latest"
TAG_RELEASE_PATH = "releases/tag"
ASSET_DOWNLOAD_PATH = "releases/download"

LINUX_ASSET = "deno_linux_x64.gz"
MACOS_ASSET = "deno_osx_x64.gz"
WINDOWS_ASSET = "deno_win_x64.zip"

POSIX_BINARY_NAME = "deno"
WINDOWS_BINARY_NAME = "deno.exe"
BACKUP_PREFIX = "old_"

INSTALL_DIRNAME = ".deno"
BIN_DIRNAME = "bin"
DEFAULT_LINK_DIR = "/usr/local/bin"

# Owner rwx, group/other read.
BINARY_MODE = 0o744

MAX_HTTP_REQUESTS = 4
DEFAULT_HTTP_TIMEOUT = 30.0

VERSION_FLAG = "--version"
VERSION_OUTPUT_PREFIX_BYTES = 32
VERSION_OUTPUT_MIN_BYTES = 16
VERIFY_MAX_ATTEMPTS = 20
VERIFY_POLL_INTERVAL = 0.5

TAG_PATTERN = r"v\d+\.\d+\.\d+"

WINDOWS_UNZIP_POWERSHELL = "powershell"
WINDOWS_UNZIP_VBSCRIPT = "vbscript"
WINDOWS_UNZIP_STRATEGIES = (WINDOWS_UNZIP_POWERSHELL, WINDOWS_UNZIP_VBSCRIPT)

INSTALL_ROOT_ENV = "DENO_INSTALL"
LINK_DIR_ENV = "DENO_INSTALL_LINK_DIR"
REPO_URL_ENV = "DENO_INSTALL_REPO_URL"
WINDOWS_UNZIP_ENV = "DENO_INSTALL_WINDOWS_UNZIP"
HTTP_TIMEOUT_ENV = "DENO_INSTALL_HTTP_TIMEOUT"
LOG_FILE_ENV = "DENO_INSTALL_LOG_FILE"

USER_AGENT = "deno-installer"
