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
Download and install a Plex package through Synology's synopkg.
"""

import os
import shutil
import subprocess
import time
from pathlib import Path
from typing import Any, Dict, List

import requests

from plexupdate.utils.index import log_message
from plexupdate.utils.permissions import make_readable
from .architecture import build_download_url, package_filename
from .config import UpdaterConfig
from .errors import DownloadFailure, InstallFailure
from .models import ReleaseCandidate
from .transport import require_url_exists

CHUNK_SIZE = 1024 * 1024


class PlexInstaller:
    """Downloads a DSM package and swaps it in for the running instance."""

    def __init__(self, config: UpdaterConfig, session):
        self.config = config
        self.session = session
        self.download_dir = Path(config.download_dir)

    def _execute_command(self, command: List[str], timeout: int = 600) -> bool:
        """Execute a command and return success status."""
        try:
            log_message(f"Running: {' '.join(command)}")
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=timeout
            )

            if result.returncode != 0:
                log_message(f"Command failed: {' '.join(command)}", "ERROR")
                if result.stderr:
                    log_message(f"Error output: {result.stderr.strip()}", "ERROR")
                return False

            if result.stdout:
                log_message(f"Command output: {result.stdout.strip()}", "DEBUG")
            return True

        except subprocess.TimeoutExpired:
            log_message(f"Command timed out: {' '.join(command)}", "ERROR")
            return False
        except OSError as e:
            log_message(f"Command execution failed: {' '.join(command)} - {e}", "ERROR")
            return False

    def download_url_for(self, candidate: ReleaseCandidate, architecture: str) -> str:
        return build_download_url(candidate, architecture, self.config.download, self.config.package_name)

    def filename_for(self, candidate: ReleaseCandidate, architecture: str) -> str:
        return package_filename(self.config.package_name, candidate.version_build,
                                architecture, self.config.download)

    def download(self, url: str, filename: str) -> Path:
        """
        Download the package into the download directory.

        Raises:
            DownloadFailure: On HTTP errors or when the file ends up empty
        """
        self.download_dir.mkdir(parents=True, exist_ok=True)
        target = self.download_dir / filename

        log_message(f"Downloading Plex package from {url}...")
        try:
            with self.session.get(url, stream=True, timeout=self.config.download_timeout) as response:
                response.raise_for_status()
                with open(target, "wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except requests.RequestException as e:
            raise DownloadFailure(f"Failed to download Plex package: {e}") from e
        except OSError as e:
            raise DownloadFailure(f"Failed to write {target}: {e}") from e

        if not target.is_file() or target.stat().st_size == 0:
            raise DownloadFailure(f"Downloaded file is missing or empty: {target}")

        log_message(f"Download completed: {filename} ({target.stat().st_size} bytes)")
        make_readable(str(target))
        return target

    def stop_service(self) -> None:
        script = self.config.start_stop_script
        if not os.path.isfile(script):
            log_message("Plex start-stop script not found, assuming service is not running", "DEBUG")
            return
        log_message("Stopping Plex Media Server...")
        if not self._execute_command([script, "stop"]):
            log_message("Stopping Plex Media Server failed, continuing with install", "WARNING")
        time.sleep(self.config.service_stop_wait)

    def start_service(self) -> bool:
        log_message("Starting Plex Media Server...")
        return self._execute_command([self.config.synopkg_bin, "start", self.config.package_name])

    def is_service_enabled(self) -> bool:
        return self._execute_command([self.config.synopkg_bin, "is_onoff", self.config.package_name])

    def install_package(self, package_path: Path) -> None:
        log_message("Installing Plex package...")
        if not self._execute_command([self.config.synopkg_bin, "install", str(package_path)]):
            raise InstallFailure(f"Failed to install Plex package {package_path.name}")

    def restart_previous(self) -> bool:
        """Best effort: bring the previous instance back after a failed install."""
        if not self.is_service_enabled():
            log_message("Previous Plex instance was not enabled, not restarting", "WARNING")
            return False
        log_message("Attempting to restart previous version...")
        restarted = self.start_service()
        if restarted:
            log_message("Previous Plex version restarted")
        else:
            log_message("Failed to restart previous Plex version", "ERROR")
        return restarted

    def cleanup(self) -> None:
        if self.download_dir.exists():
            shutil.rmtree(self.download_dir, ignore_errors=True)
            log_message(f"Removed download directory {self.download_dir}")

    def install(self, candidate: ReleaseCandidate, architecture: str) -> Dict[str, Any]:
        """
        Verify, download and install a release.

        Returns:
            dict: Download URL, filename and whether the service came back up

        Raises:
            VerificationFailure, DownloadFailure, InstallFailure
        """
        url = self.download_url_for(candidate, architecture)
        log_message(f"Constructed download URL: {url}")
        require_url_exists(self.session, url, self.config.request_timeout)

        filename = self.filename_for(candidate, architecture)
        package_path = self.download(url, filename)

        self.stop_service()
        try:
            self.install_package(package_path)
        except InstallFailure:
            self.restart_previous()
            raise

        log_message(f"Plex Media Server successfully updated to version {candidate.version}")
        started = self.start_service()
        if not started:
            log_message("Plex Media Server did not start after install", "WARNING")

        package_path.unlink(missing_ok=True)
        log_message("Installation completed and cleanup finished")
        return {
            "download_url": url,
            "filename": filename,
            "service_started": started,
        }
