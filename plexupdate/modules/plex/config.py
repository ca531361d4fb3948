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
Configuration for the Plex update module.
"""

import copy
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from plexupdate.utils.index import load_json_config

CONFIG_PATH = os.path.join(os.path.dirname(__file__), "index.json")

DEFAULT_CONFIG: Dict[str, Any] = {
    "metadata": {
        "schema_version": "1.0.0",
        "module_name": "plex"
    },
    "config": {
        "download_dir": "/tmp/plex_update",
        "log_file": "/var/log/plex_updater.log",
        "user_agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36",
        "request_timeout": 10,
        "download_timeout": 300,
        "service_stop_wait": 5,
        "package": {
            "name": "PlexMediaServer",
            "info_file": "/var/packages/PlexMediaServer/INFO",
            "start_stop_script": "/var/packages/PlexMediaServer/scripts/start-stop-status",
            "synopkg_bin": "/usr/syno/bin/synopkg"
        },
        "download": {
            "base_url": "https://downloads.plex.tv/plex-media-server-new",
            "platform_path": "synology-dsm72",
            "platform": "DSM72",
            "extension": "spk"
        },
        "sources": {
            "github_api_url": "https://api.github.com/repos/plexinc/pms-docker/releases/latest",
            "plex_api_url": "https://plex.tv/api/downloads/5.json",
            "download_page_url": "https://www.plex.tv/media-server-downloads/"
        },
        "build_probe": {
            "enabled": True,
            "hashes": ["4e8b05daf", "5a0e5b123", "6f1c8d456", "7a2b9e789", "8c3f1a234"]
        }
    }
}


def load_module_config(config_path: str = CONFIG_PATH) -> Dict[str, Any]:
    """
    Load configuration from the module's index.json file.
    Returns:
        dict: Configuration data or default values if loading fails
    """
    return load_json_config(config_path, copy.deepcopy(DEFAULT_CONFIG))


@dataclass(frozen=True)
class DownloadLayout:
    """Pieces of the downloads.plex.tv URL template."""
    base_url: str = "https://downloads.plex.tv/plex-media-server-new"
    platform_path: str = "synology-dsm72"
    platform: str = "DSM72"
    extension: str = "spk"


@dataclass(frozen=True)
class UpdaterConfig:
    """Typed view over the ``config`` section of index.json."""
    download_dir: str = "/tmp/plex_update"
    log_file: str = "/var/log/plex_updater.log"
    user_agent: str = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36"
    request_timeout: float = 10
    download_timeout: float = 300
    service_stop_wait: float = 5
    package_name: str = "PlexMediaServer"
    info_file: str = "/var/packages/PlexMediaServer/INFO"
    start_stop_script: str = "/var/packages/PlexMediaServer/scripts/start-stop-status"
    synopkg_bin: str = "/usr/syno/bin/synopkg"
    download: DownloadLayout = field(default_factory=DownloadLayout)
    github_api_url: str = "https://api.github.com/repos/plexinc/pms-docker/releases/latest"
    plex_api_url: str = "https://plex.tv/api/downloads/5.json"
    download_page_url: str = "https://www.plex.tv/media-server-downloads/"
    build_probe_enabled: bool = True
    build_probe_hashes: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, module_config: Dict[str, Any]) -> "UpdaterConfig":
        """Build the config from a loaded index.json, using defaults for missing keys."""
        defaults = DEFAULT_CONFIG["config"]
        config = module_config.get("config", {})
        package = {**defaults["package"], **config.get("package", {})}
        download = {**defaults["download"], **config.get("download", {})}
        sources = {**defaults["sources"], **config.get("sources", {})}
        probe = {**defaults["build_probe"], **config.get("build_probe", {})}
        hashes: List[str] = [str(h).strip().lower() for h in probe.get("hashes", []) if str(h).strip()]

        return cls(
            download_dir=config.get("download_dir", defaults["download_dir"]),
            log_file=config.get("log_file", defaults["log_file"]),
            user_agent=config.get("user_agent", defaults["user_agent"]),
            request_timeout=float(config.get("request_timeout", defaults["request_timeout"])),
            download_timeout=float(config.get("download_timeout", defaults["download_timeout"])),
            service_stop_wait=float(config.get("service_stop_wait", defaults["service_stop_wait"])),
            package_name=package["name"],
            info_file=package["info_file"],
            start_stop_script=package["start_stop_script"],
            synopkg_bin=package["synopkg_bin"],
            download=DownloadLayout(
                base_url=download["base_url"].rstrip("/"),
                platform_path=download["platform_path"],
                platform=download["platform"],
                extension=download["extension"],
            ),
            github_api_url=sources["github_api_url"],
            plex_api_url=sources["plex_api_url"],
            download_page_url=sources["download_page_url"],
            build_probe_enabled=bool(probe.get("enabled", True)),
            build_probe_hashes=tuple(hashes),
        )
