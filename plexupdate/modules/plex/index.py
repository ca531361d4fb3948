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
Plex Media Server Update Module

Resolves the latest Plex release for this NAS, decides whether it should
be installed and hands it to synopkg.
"""

import os
from typing import Optional, Sequence, Tuple

from plexupdate.utils.index import log_message, get_module_version
from .architecture import detect_architecture
from .config import UpdaterConfig, load_module_config
from .errors import PlexUpdateError, ResolutionFailure, UnsupportedArchitecture
from .installer import PlexInstaller
from .models import InstalledState, ReleaseCandidate, UpdateDecision
from .package_info import get_installed_state
from .policy import decide
from .resolver import ReleaseResolver
from .sources import ReleaseSource, default_sources
from .transport import create_session
from .versioning import find_malformed_components

# Global configuration
MODULE_CONFIG = load_module_config()


def check_for_update(config: UpdaterConfig, session, architecture: str, force_build_update: bool = False,
                     sources: Optional[Sequence[ReleaseSource]] = None,
                     installed: Optional[InstalledState] = None
                     ) -> Tuple[InstalledState, ReleaseCandidate, UpdateDecision]:
    """
    Resolve the latest release and decide whether to install it.

    Raises:
        UnsupportedArchitecture, ResolutionFailure
    """
    if installed is None:
        installed = get_installed_state(config.info_file)
    if sources is None:
        sources = default_sources(session, config)

    log_message("Checking for latest Plex version...")
    latest = ReleaseResolver(sources).resolve(installed, architecture)
    log_message(f"Latest available version: {latest.version} (build: {latest.version_build}, source: {latest.source})")

    for label, version in (("installed", installed.version), ("latest", latest.version)):
        malformed = find_malformed_components(version)
        if malformed:
            log_message(f"Malformed {label} version components treated as 0: {malformed}", "WARNING")

    decision = decide(installed, latest, force_build_update)
    log_message(decision.reason)
    return installed, latest, decision


def main(args=None):
    """
    Main entry point for the Plex update module.
    Args:
        args: List of arguments (supports '--force-build-update', '--check', '--config')
    Returns:
        dict: Status and results of the update
    """
    if args is None:
        args = []

    config = UpdaterConfig.from_dict(MODULE_CONFIG)
    force_build_update = "--force-build-update" in args
    check_only = "--check" in args

    # --config mode: show current configuration
    if "--config" in args:
        log_message("Current Plex module configuration:")
        log_message(f"  Schema version: {get_module_version(os.path.dirname(__file__))}")
        for key, value in vars(config).items():
            log_message(f"  {key}: {value}")
        return {"success": True, "config": MODULE_CONFIG}

    log_message("Starting Plex update check...")

    try:
        architecture = detect_architecture()
    except UnsupportedArchitecture as e:
        log_message(str(e), "ERROR")
        return {"success": False, "error": str(e)}
    log_message(f"Detected architecture: {architecture}")

    session = create_session(config.user_agent)
    installer = PlexInstaller(config, session)
    try:
        try:
            installed, latest, decision = check_for_update(config, session, architecture, force_build_update)
        except ResolutionFailure as e:
            log_message(f"Could not determine any valid Plex version: {e}", "ERROR")
            return {"success": False, "error": str(e)}

        result = {
            "success": True,
            "updated": False,
            "decision": decision.action.value,
            "reason": decision.reason,
            "current_version": installed.version_build,
            "latest_version": latest.version_build,
            "source": latest.source,
        }

        # --check mode: resolve and decide only
        if check_only:
            if decision.should_update:
                result["download_url"] = installer.download_url_for(latest, architecture)
                result["filename"] = installer.filename_for(latest, architecture)
            return result

        if not decision.should_update:
            return result

        try:
            install_result = installer.install(decision.target, architecture)
        except PlexUpdateError as e:
            log_message(f"Update failed: {e}", "ERROR")
            result.update({"success": False, "error": str(e)})
            return result

        result.update(install_result)
        result.update({"updated": True, "new_version": decision.target.version_build})
        return result
    finally:
        # A check run holds no lock, so the download dir may belong to an install in progress
        if not check_only:
            installer.cleanup()
        session.close()
        log_message("Update check completed")


if __name__ == "__main__":
    main()
