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

from typing import List, Sequence

from plexupdate.utils.index import log_message
from .architecture import require_supported
from .errors import ResolutionFailure
from .models import InstalledState, ReleaseCandidate
from .sources import ReleaseSource


class ReleaseResolver:
    """Try release sources in priority order until one yields a candidate."""

    def __init__(self, sources: Sequence[ReleaseSource]):
        self.sources: List[ReleaseSource] = list(sources)

    def resolve(self, current_state: InstalledState, architecture: str) -> ReleaseCandidate:
        """
        Find the latest release.

        Args:
            current_state: Installed version, used by the build probe source
            architecture: Plex architecture name (x86_64, x86, armv7hf, aarch64)

        Returns:
            ReleaseCandidate: Result of the first source that succeeded

        Raises:
            UnsupportedArchitecture: Before any source is queried
            ResolutionFailure: If every source came back empty
        """
        require_supported(architecture)

        tried = []
        for source in self.sources:
            log_message(f"Trying release source: {source.name}")
            tried.append(source.name)
            candidate = source.query(architecture, current_state)
            if candidate is not None:
                log_message(f"Release source {source.name} found {candidate.version_build}")
                return candidate
            log_message(f"Release source {source.name} gave no result", "WARNING")

        raise ResolutionFailure(f"Could not determine the latest Plex version (tried: {', '.join(tried) or 'none'})")
