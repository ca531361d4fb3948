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


class PlexUpdateError(Exception):
    """Base exception for Plex update failures."""
    pass


class UnsupportedArchitecture(PlexUpdateError):
    """The machine architecture has no matching Plex package."""
    pass


class ParseFailure(PlexUpdateError):
    """No four-part dotted version could be found in the input."""
    pass


class ResolutionFailure(PlexUpdateError):
    """Every release source was tried without a usable result."""
    pass


class VerificationFailure(PlexUpdateError):
    """A download URL did not answer with HTTP 200."""
    pass


class DownloadFailure(PlexUpdateError):
    """The package could not be downloaded or the file is empty."""
    pass


class InstallFailure(PlexUpdateError):
    """synopkg failed to install the downloaded package."""
    pass
