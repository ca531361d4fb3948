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

import platform
from typing import Optional

from .config import DownloadLayout
from .errors import UnsupportedArchitecture
from .models import ReleaseCandidate

# uname -m -> architecture suffix used in Plex package names
MACHINE_ARCHITECTURES = {
    "x86_64": "x86_64",
    "i686": "x86",
    "i386": "x86",
    "armv7l": "armv7hf",
    "aarch64": "aarch64",
}

SUPPORTED_ARCHITECTURES = frozenset(MACHINE_ARCHITECTURES.values())


def detect_architecture(machine: Optional[str] = None) -> str:
    """
    Map the machine type to Plex's architecture naming.

    Args:
        machine: Value of ``uname -m``; read from the running system when None

    Raises:
        UnsupportedArchitecture: If Plex ships no DSM package for the machine
    """
    if machine is None:
        machine = platform.machine()
    arch = MACHINE_ARCHITECTURES.get(machine)
    if arch is None:
        raise UnsupportedArchitecture(f"Unsupported architecture: {machine or 'unknown'}")
    return arch


def require_supported(architecture: str) -> str:
    if architecture not in SUPPORTED_ARCHITECTURES:
        raise UnsupportedArchitecture(f"Unsupported architecture: {architecture}")
    return architecture


def package_filename(package_name: str, version_build: str, architecture: str, layout: DownloadLayout) -> str:
    """Filename of a DSM package, e.g. PlexMediaServer-1.42.1.10060-4e8b05daf-x86_64_DSM72.spk."""
    return f"{package_name}-{version_build}-{architecture}_{layout.platform}.{layout.extension}"


def build_download_url(candidate: ReleaseCandidate, architecture: str, layout: DownloadLayout,
                       package_name: str = "PlexMediaServer") -> str:
    """
    Construct the downloads.plex.tv URL for a release candidate.

    Format: {base}/{version}-{build}/{platform_path}/{package}-{version}-{build}-{arch}_{platform}.{ext}
    """
    version_build = candidate.version_build
    filename = package_filename(package_name, version_build, architecture, layout)
    return f"{layout.base_url}/{version_build}/{layout.platform_path}/{filename}"
