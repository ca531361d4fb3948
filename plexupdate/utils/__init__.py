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
Utilities for the Plex updater.

This module provides common utilities used by the orchestrator and the
update modules.
"""

from .index import log_message, setup_update_logging, load_json_config, get_module_version
from .permissions import is_running_as_root, require_root, make_readable
from .run_lock import RunLock

__all__ = [
    'log_message',
    'setup_update_logging',
    'load_json_config',
    'get_module_version',
    'is_running_as_root',
    'require_root',
    'make_readable',
    'RunLock'
]
