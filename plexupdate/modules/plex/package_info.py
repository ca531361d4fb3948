"""
HOMESERVER Update Management System
Copyright (C) 2024 HOMESERVER LLC

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

import os
from typing import Dict

from plexupdate.utils.index import log_message
from .errors import ParseFailure
from .models import InstalledState
from .versioning import parse


def read_package_info(info_file: str) -> Dict[str, str]:
    """
    Read a DSM package INFO file (key="value" per line).

    Args:
        info_file: Path to /var/packages/<name>/INFO

    Returns:
        dict: Keys and unquoted values
    """
    values = {}
    with open(info_file, 'r') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            values[key.strip()] = value.strip().strip('"')
    return values


def get_installed_state(info_file: str) -> InstalledState:
    """
    Get the installed Plex version from the package INFO file.

    Returns:
        InstalledState: Installed version, or the not-installed sentinel
    """
    if not os.path.isfile(info_file):
        log_message("Plex Media Server not currently installed")
        return InstalledState.not_installed()

    try:
        info = read_package_info(info_file)
    except OSError as e:
        log_message(f"Failed to read {info_file}: {e}", "WARNING")
        return InstalledState.not_installed()

    raw_version = info.get("version", "")
    try:
        candidate = parse(raw_version, source=info_file)
    except ParseFailure as e:
        log_message(f"Could not parse installed version {raw_version!r}: {e}", "WARNING")
        return InstalledState.not_installed()

    state = InstalledState(version=candidate.version, build_id=candidate.build_id)
    log_message(f"Currently installed Plex version: {state.version_build}")
    return state
