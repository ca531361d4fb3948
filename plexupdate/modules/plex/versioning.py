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
Plex version parsing and comparison.

Plex publishes versions as four dotted integers followed by a build
identifier, e.g. ``1.42.1.10060-4e8b05daf``. The identifier is either a hex
hash or, on packages installed by DSM, a numeric string.
"""

import re
from enum import Enum
from typing import Iterator, List, Optional, Sequence

from packaging.version import Version

from .errors import ParseFailure
from .models import ReleaseCandidate, VersionTuple

# Exactly four integer groups; a fifth group or a leading dot means the text
# is not a Plex version. The build token runs to the next separator and keeps
# any dotted digits, e.g. the build part of 1.42.1.10060-1.42.1.10061.
VERSION_PATTERN = re.compile(
    r'(?<![\d.])(\d+)\.(\d+)\.(\d+)\.(\d+)(?!\d|\.\d)'
    r'(?:-([0-9A-Fa-f]+(?:\.\d+)*)(?![0-9A-Za-z]|\.\d))?'
)

VERSION_COMPONENTS = 4


class Ordering(Enum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


def parse(text: Optional[str], source: str = "text") -> ReleaseCandidate:
    """
    Extract the first Plex version and build identifier from free-form text.

    Args:
        text: Filename, URL, JSON fragment or page content
        source: Name recorded on the resulting candidate

    Returns:
        ReleaseCandidate: Parsed version with its build identifier (or None)

    Raises:
        ParseFailure: If no four-part dotted version is present
    """
    if not isinstance(text, str) or not text.strip():
        raise ParseFailure(f"Empty or non-text version input from {source}: {text!r}")

    for candidate in iter_candidates(text, source):
        return candidate
    raise ParseFailure(f"No four-part version found in {text[:120]!r} from {source}")


def iter_candidates(text: str, source: str = "text") -> Iterator[ReleaseCandidate]:
    """Yield every version found in ``text``, in order of appearance."""
    for match in VERSION_PATTERN.finditer(text or ""):
        version = VersionTuple(*(int(group) for group in match.groups()[:VERSION_COMPONENTS]))
        build_id = match.group(5)
        yield ReleaseCandidate(
            version=version,
            build_id=build_id.lower() if build_id else None,
            source=source,
        )


def parse_version_tuple(text: Optional[str]) -> VersionTuple:
    """Parse only the version part of ``text``; see :func:`parse`."""
    return parse(text).version


def _coerce(components: Sequence) -> List[int]:
    values = []
    for component in list(components)[:VERSION_COMPONENTS]:
        try:
            value = int(component)
        except (TypeError, ValueError):
            value = 0
        values.append(max(value, 0))
    values.extend([0] * (VERSION_COMPONENTS - len(values)))
    return values


def find_malformed_components(components: Sequence) -> List[object]:
    """Return the components that :func:`compare` would treat as 0."""
    malformed = []
    for component in components:
        try:
            if int(component) < 0:
                malformed.append(component)
        except (TypeError, ValueError):
            malformed.append(component)
    return malformed


def compare(a: Sequence, b: Sequence) -> Ordering:
    """
    Compare two version tuples component by component.

    Missing trailing components count as 0 and so do non-numeric ones.
    Callers that care about malformed input should check it with
    :func:`find_malformed_components` and log it themselves.

    Returns:
        Ordering: LESS if a < b, EQUAL if all four components match, GREATER otherwise
    """
    left = Version(".".join(str(part) for part in _coerce(a)))
    right = Version(".".join(str(part) for part in _coerce(b)))
    if left < right:
        return Ordering.LESS
    if left > right:
        return Ordering.GREATER
    return Ordering.EQUAL


def same_build(a: Optional[str], b: Optional[str]) -> bool:
    """Build identifiers are opaque; only equality matters."""
    if a is None or b is None:
        return a is b
    return a.lower() == b.lower()
