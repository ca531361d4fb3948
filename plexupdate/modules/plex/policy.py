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
Update decision policy.

A higher version always updates. A different build of the same version
only updates when forced, because Plex regularly republishes a version with
a new build hash and reinstalling for that is churn.
"""

from .models import DecisionAction, InstalledState, ReleaseCandidate, UpdateDecision
from .versioning import Ordering, compare, same_build


def decide(installed: InstalledState, latest: ReleaseCandidate, force_build_update: bool) -> UpdateDecision:
    """
    Decide whether the latest release should be installed.

    Args:
        installed: Installed version, or the not-installed sentinel
        latest: Resolved latest release
        force_build_update: Also update when only the build identifier differs

    Returns:
        UpdateDecision: Action, target release and a readable reason
    """
    ordering = compare(installed.version, latest.version)

    if ordering is Ordering.LESS:
        if installed.is_installed:
            reason = f"Update available: {installed.version} -> {latest.version}"
        else:
            reason = f"Plex is not installed, installing {latest.version}"
        return UpdateDecision(DecisionAction.UPDATE_VERSION, reason, latest)

    if ordering is Ordering.GREATER:
        return UpdateDecision(
            DecisionAction.LATEST_OLDER_THAN_INSTALLED,
            f"Installed version {installed.version} is newer than latest reported {latest.version} "
            f"(from {latest.source}), nothing to do",
        )

    builds_differ = not same_build(installed.build_id, latest.build_id)
    if force_build_update and builds_differ and latest.build_id:
        return UpdateDecision(
            DecisionAction.UPDATE_BUILD,
            f"Forced build update for {latest.version}: {installed.build_id or 'unknown'} -> {latest.build_id}",
            latest,
        )

    reason = f"Plex is already up to date (version {installed.version_build})"
    if builds_differ and latest.build_id and not force_build_update:
        reason += (f"; a different build ({latest.build_id}) is available for the same version, "
                   f"use --force-build-update to install it")
    return UpdateDecision(DecisionAction.NO_UPDATE, reason)
