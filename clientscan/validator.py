"""Version validation utilities.

Validates and normalizes version strings pulled out of user agents and
brand lists.
"""

import re
from typing import Optional, Tuple

# Dotted version: at least major, any number of further parts
DOTTED_PATTERN = re.compile(r'^(\d+)(?:\.(\d+))*$')


def normalize_version(version: Optional[str]) -> str:
    """Normalize version string format.

    Examples:
        "v17.0" -> "17.0"
        "17_0_1" -> "17.0.1"
        " 120.0 " -> "120.0"
    """
    if not version:
        return ''
    version = version.strip().lstrip('vV')
    return version.replace('_', '.')


def parse_version(version: str) -> Optional[Tuple[int, ...]]:
    """Parse a dotted version string into a tuple of ints.

    Returns None if invalid format.
    """
    if not version or not DOTTED_PATTERN.match(version):
        return None
    return tuple(int(part) for part in version.split('.'))


def major_version(version: str) -> Optional[int]:
    parsed = parse_version(version)
    return parsed[0] if parsed else None


def is_plausible_version(version: Optional[str]) -> bool:
    """Check if version is plausible (not obviously incorrect).

    Filters out:
    - Empty or null values
    - Non-numeric values
    - Timestamp-like values (Gecko/20100101 build dates, 1768368369)
    """
    if not version:
        return False
    parsed = parse_version(version)
    if not parsed:
        return False
    if re.match(r'^\d{8,}$', version):
        return False
    return True
