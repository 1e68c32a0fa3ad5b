"""Helpers for the PowerShell and VBScript snippets used on Windows."""

from __future__ import annotations

import logging
import ntpath
import textwrap
from pathlib import Path


__all__ = [
    "append_user_path_command",
    "expand_archive_command",
    "path_contains",
    "vbscript_unzip_command",
    "write_unzip_script",
]


_LOGGER = logging.getLogger(__name__)

_UNZIP_SCRIPT_NAME = "wunzip.vbs"

# CopyHere flags: 4 hides the progress dialog, 16 answers "Yes to All".
_UNZIP_SCRIPT = textwrap.dedent(
    """
    Set objShell = CreateObject("Shell.Application")
    Set FilesInZip = objShell.NameSpace("{archive}").Items
    objShell.NameSpace("{destination}").CopyHere FilesInZip, 20
    waited = 0
    Do While objShell.NameSpace("{destination}").ParseName("{binary}") Is Nothing
        If waited >= 600 Then WScript.Quit 1
        WScript.Sleep 100
        waited = waited + 1
    Loop
    Set objShell = Nothing
    """
).strip()

_APPEND_USER_PATH = textwrap.dedent(
    """
    $entry = {entry}
    $current = [Environment]::GetEnvironmentVariable('Path', 'User')
    if ($null -eq $current) {{ $current = '' }}
    $parts = $current -split ';' | Where-Object {{ $_ -ne '' }}
    if ($parts -notcontains $entry) {{
        $updated = (@($parts) + $entry) -join ';'
        [Environment]::SetEnvironmentVariable('Path', $updated, [EnvironmentVariableTarget]::User)
    }}
    """
).strip()


def _powershell(script: str) -> tuple[str, ...]:
    return ("powershell.exe", "-NoProfile", "-NonInteractive", "-Command", script)


def quote_powershell(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def expand_archive_command(archive: Path, destination: Path) -> tuple[str, ...]:
    return _powershell(
        f"Expand-Archive -LiteralPath {quote_powershell(str(archive))} "
        f"-DestinationPath {quote_powershell(str(destination))} -Force"
    )


def write_unzip_script(workspace: Path, archive: Path, destination: Path, binary_name: str) -> Path:
    """Write the ``Shell.Application`` unzip helper into ``workspace``."""

    script_path = workspace / _UNZIP_SCRIPT_NAME
    content = _UNZIP_SCRIPT.format(
        archive=str(archive).replace('"', '""'),
        destination=str(destination).replace('"', '""'),
        binary=binary_name.replace('"', '""'),
    )
    script_path.write_text(content + "\r\n", encoding="utf-8")
    _LOGGER.debug("Wrote unzip helper script to %s", script_path)
    return script_path


def vbscript_unzip_command(script_path: Path) -> tuple[str, ...]:
    return ("cscript", "//nologo", str(script_path))


def append_user_path_command(directory: Path) -> tuple[str, ...]:
    """Command appending ``directory`` to the persistent user-level PATH."""

    return _powershell(_APPEND_USER_PATH.format(entry=quote_powershell(str(directory))))


def path_contains(path_value: str, directory: Path) -> bool:
    """Return ``True`` if the ``;``-separated ``path_value`` lists ``directory``."""

    wanted = _normalise_entry(str(directory))
    return any(
        _normalise_entry(entry) == wanted for entry in path_value.split(";") if entry.strip()
    )


def _normalise_entry(entry: str) -> str:
    cleaned = entry.strip().strip('"')
    return ntpath.normcase(ntpath.normpath(cleaned)).rstrip("\\")
