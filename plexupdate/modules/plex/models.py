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
Data types shared by the Plex version resolution and update decision code.
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional


class VersionTuple(NamedTuple):
    """Four-part Plex version (major, minor, patch, build)."""
    major: int
    minor: int
    patch: int
    build: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}.{self.build}"


NOT_INSTALLED_VERSION = VersionTuple(0, 0, 0, 0)


@dataclass(frozen=True)
class ReleaseCandidate:
    """A version and build identifier reported by one release source."""
    version: VersionTuple
    build_id: Optional[str]
    source: str

    @property
    def version_build(self) -> str:
        """Version joined with its build identifier, as used in download paths."""
        if self.build_id:
            return f"{self.version}-{self.build_id}"
        return str(self.version)


@dataclass(frozen=True)
class InstalledState:
    """Version currently installed on the NAS."""
    version: VersionTuple
    build_id: Optional[str] = None

    @classmethod
    def not_installed(cls) -> "InstalledState":
        return cls(version=NOT_INSTALLED_VERSION, build_id=None)

    @property
    def is_installed(self) -> bool:
        return self.version != NOT_INSTALLED_VERSION

    @property
    def version_build(self) -> str:
        if self.build_id:
            return f"{self.version}-{self.build_id}"
        return str(self.version)


class DecisionAction(Enum):
    NO_UPDATE = "no_update"
    UPDATE_VERSION = "update_version"
    UPDATE_BUILD = "update_build"
    LATEST_OLDER_THAN_INSTALLED = "latest_older_than_installed"


@dataclass(frozen=True)
class UpdateDecision:
    """Outcome of comparing the installed state against the latest release."""
    action: DecisionAction
    reason: str
    target: Optional[ReleaseCandidate] = None

    @property
    def should_update(self) -> bool:
        return self.action in (DecisionAction.UPDATE_VERSION, DecisionAction.UPDATE_BUILD)
