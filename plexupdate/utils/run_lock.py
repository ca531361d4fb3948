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

import fcntl
import os
from pathlib import Path
from typing import Optional, TextIO

from .index import log_message


class RunLock:
    """Non-blocking process lock so only one updater installs at a time."""

    def __init__(self, lock_file: str):
        self.lock_file = Path(lock_file)
        self.locked = False
        self._handle: Optional[TextIO] = None

    def acquire(self) -> bool:
        """
        Try to take the lock without waiting.

        Returns:
            bool: True if the lock is now held, False if another run holds it
        """
        if self.locked:
            return True
        self.lock_file.parent.mkdir(parents=True, exist_ok=True)
        handle = self.lock_file.open("a+")
        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except (BlockingIOError, OSError):
            handle.close()
            log_message(f"Another updater run holds {self.lock_file}", "ERROR")
            return False
        handle.seek(0)
        handle.truncate()
        handle.write(str(os.getpid()))
        handle.flush()
        self._handle = handle
        self.locked = True
        return True

    def release(self) -> None:
        if not self.locked or self._handle is None:
            return
        try:
            fcntl.flock(self._handle.fileno(), fcntl.LOCK_UN)
        finally:
            self._handle.close()
            self._handle = None
            self.locked = False

    def __enter__(self):
        if not self.acquire():
            raise RuntimeError(f"Another updater run holds {self.lock_file}")
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
