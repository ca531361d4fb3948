#!/usr/bin/env python3
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

"""
Privilege and file permission helpers.

Package installation through synopkg only works as root, so the orchestrator
checks privileges before touching the network or the package manager.
"""

import os
import stat
from .index import log_message


def is_running_as_root() -> bool:
    """Return True when the effective user is root."""
    geteuid = getattr(os, "geteuid", None)
    if geteuid is None:
        return False
    return geteuid() == 0


def require_root() -> bool:
    """
    Check that the updater runs with root privileges.

    Returns:
        bool: True if running as root, False otherwise (error is logged)
    """
    if is_running_as_root():
        return True
    log_message("This updater must be run as root", "ERROR")
    return False


def make_readable(path: str) -> bool:
    """
    Make a downloaded package readable by the package manager.

    Args:
        path: File to adjust

    Returns:
        bool: True on success, False otherwise
    """
    try:
        current = os.stat(path).st_mode
        os.chmod(path, current | stat.S_IRUSR | stat.S_IRGRP | stat.S_IROTH)
        return True
    except OSError as e:
        log_message(f"Failed to set read permissions on {path}: {e}", "WARNING")
        return False
