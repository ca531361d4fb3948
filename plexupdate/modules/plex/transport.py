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
HTTP helpers shared by the release sources and the installer.

Every request carries an explicit timeout so a hung upstream cannot stall
the resolution chain.
"""

import requests

from plexupdate.utils.index import log_message
from .errors import VerificationFailure


def create_session(user_agent: str) -> requests.Session:
    """Create a requests session that identifies as a regular browser."""
    session = requests.Session()
    session.headers.update({"User-Agent": user_agent})
    return session


def verify_url_exists(session, url: str, timeout: float) -> bool:
    """
    Check a download URL with a HEAD request.

    Returns:
        bool: True only for HTTP 200
    """
    try:
        response = session.head(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        log_message(f"URL check failed for {url}: {e}", "WARNING")
        return False

    if response.status_code == 200:
        return True
    log_message(f"URL returned HTTP {response.status_code}: {url}", "WARNING")
    return False


def require_url_exists(session, url: str, timeout: float) -> str:
    """Like :func:`verify_url_exists` but raises VerificationFailure."""
    if not verify_url_exists(session, url, timeout):
        raise VerificationFailure(f"Download URL does not exist or is not accessible: {url}")
    return url
