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
Release sources for Plex Media Server.

Each source answers ``query(architecture, current_state)`` with a
ReleaseCandidate or None. Network and parse problems are logged and turned
into None so the resolver can fall through to the next source.
"""

from typing import Any, Iterable, Iterator, List, Optional, Protocol

import requests

from plexupdate.utils.index import log_message
from .architecture import build_download_url
from .config import DownloadLayout
from .errors import ParseFailure
from .models import InstalledState, ReleaseCandidate
from .transport import verify_url_exists
from .versioning import iter_candidates, parse

RELEASE_KEYS = ("release", "version")


class ReleaseSource(Protocol):
    """Anything that can report the latest Plex release."""

    name: str

    def query(self, architecture: str, current_state: InstalledState) -> Optional[ReleaseCandidate]:
        ...


def _fetch(session, url: str, timeout: float) -> requests.Response:
    response = session.get(url, timeout=timeout)
    response.raise_for_status()
    return response


class GitHubTagSource:
    """Latest release tag of the plexinc/pms-docker repository."""

    name = "github"

    def __init__(self, session, api_url: str, timeout: float):
        self.session = session
        self.api_url = api_url
        self.timeout = timeout

    def query(self, architecture: str, current_state: InstalledState) -> Optional[ReleaseCandidate]:
        try:
            data = _fetch(self.session, self.api_url, self.timeout).json()
        except (requests.RequestException, ValueError) as e:
            log_message(f"GitHub API request failed: {e}", "WARNING")
            return None

        tag = data.get("tag_name") if isinstance(data, dict) else None
        if not isinstance(tag, str):
            log_message(f"GitHub tag_name is not a string: {tag!r}", "WARNING")
            return None
        try:
            candidate = parse(tag, source=self.name)
        except ParseFailure as e:
            log_message(f"GitHub tag not usable: {e}", "WARNING")
            return None

        # Docker tags without a build hash cannot be mapped to a DSM download
        if not candidate.build_id:
            log_message(f"GitHub tag {tag!r} has no build hash", "WARNING")
            return None
        return candidate


def _walk_release_strings(node: Any) -> Iterator[str]:
    """Yield release/version strings of a JSON document in document order."""
    if isinstance(node, dict):
        for key, value in node.items():
            if key in RELEASE_KEYS and isinstance(value, str):
                yield value
            else:
                yield from _walk_release_strings(value)
    elif isinstance(node, list):
        for item in node:
            yield from _walk_release_strings(item)


class PlexDownloadsApiSource:
    """The plex.tv downloads JSON; Synology entries are preferred."""

    name = "plex_api"

    def __init__(self, session, api_url: str, timeout: float):
        self.session = session
        self.api_url = api_url
        self.timeout = timeout

    def _release_strings(self, data: Any) -> Iterator[str]:
        if isinstance(data, dict):
            nas = data.get("nas", {})
            if isinstance(nas, dict):
                for platform_name, entry in nas.items():
                    if platform_name.lower().startswith("synology"):
                        yield from _walk_release_strings(entry)
        yield from _walk_release_strings(data)

    def query(self, architecture: str, current_state: InstalledState) -> Optional[ReleaseCandidate]:
        try:
            data = _fetch(self.session, self.api_url, self.timeout).json()
        except (requests.RequestException, ValueError) as e:
            log_message(f"Plex downloads API request failed: {e}", "WARNING")
            return None

        for release in self._release_strings(data):
            try:
                return parse(release, source=self.name)
            except ParseFailure as e:
                log_message(f"Skipping Plex API release {release!r}: {e}", "DEBUG")
        log_message("Plex downloads API returned no parseable release", "WARNING")
        return None


class DownloadPageSource:
    """First ``X.Y.Z.W-hash`` token on the public download page."""

    name = "download_page"

    def __init__(self, session, page_url: str, timeout: float):
        self.session = session
        self.page_url = page_url
        self.timeout = timeout

    def query(self, architecture: str, current_state: InstalledState) -> Optional[ReleaseCandidate]:
        try:
            content = _fetch(self.session, self.page_url, self.timeout).text
        except requests.RequestException as e:
            log_message(f"Download page request failed: {e}", "WARNING")
            return None

        for candidate in iter_candidates(content, source=self.name):
            if candidate.build_id:
                return candidate
        log_message("Download page contained no version with a build hash", "WARNING")
        return None


class BuildProbeSource:
    """
    Best-effort guess of a republished build of the installed version.

    DSM reports numeric build identifiers for installed packages while the
    download host uses hex hashes. When the installed build is numeric, the
    installed version is paired with each configured hash guess and the
    first one whose download URL answers HTTP 200 wins. The guesses are a
    static, hand-maintained list and go stale with every Plex release.
    """

    name = "build_probe"

    def __init__(self, session, hashes: Iterable[str], layout: DownloadLayout, timeout: float,
                 package_name: str = "PlexMediaServer"):
        self.session = session
        self.hashes: List[str] = list(hashes)
        self.layout = layout
        self.timeout = timeout
        self.package_name = package_name

    def query(self, architecture: str, current_state: InstalledState) -> Optional[ReleaseCandidate]:
        if not self.hashes:
            log_message("No build hash guesses configured", "DEBUG")
            return None
        if not current_state.is_installed:
            log_message("Build probe needs an installed version to start from", "DEBUG")
            return None
        if not (current_state.build_id and current_state.build_id.isdigit()):
            log_message(f"Installed build {current_state.build_id!r} is not numeric, skipping probe", "DEBUG")
            return None

        for build_hash in self.hashes:
            candidate = ReleaseCandidate(version=current_state.version, build_id=build_hash, source=self.name)
            url = build_download_url(candidate, architecture, self.layout, self.package_name)
            if verify_url_exists(self.session, url, self.timeout):
                log_message(f"Build probe verified {candidate.version_build}")
                return candidate
        return None


def default_sources(session, config) -> List[ReleaseSource]:
    """
    Build the source chain in priority order from an UpdaterConfig.
    """
    sources: List[ReleaseSource] = [
        GitHubTagSource(session, config.github_api_url, config.request_timeout),
        PlexDownloadsApiSource(session, config.plex_api_url, config.request_timeout),
        DownloadPageSource(session, config.download_page_url, config.request_timeout),
    ]
    if config.build_probe_enabled:
        sources.append(BuildProbeSource(
            session,
            config.build_probe_hashes,
            config.download,
            config.request_timeout,
            config.package_name,
        ))
    return sources
